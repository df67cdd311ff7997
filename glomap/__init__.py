"""Scene model, two-view geometry and view-graph processing for global structure-from-motion."""

__version__ = "1.1.0"