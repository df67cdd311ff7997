"""Breadth-first search and maximum spanning trees over the view graph."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import NamedTuple

from glomap.image import Image
from glomap.union_find import UnionFind
from glomap.view_graph import ViewGraph


class WeightType(Enum):
    INLIER_NUM = 0
    INLIER_RATIO = 1


class BfsResult(NamedTuple):
    """Number of vertices reached besides the root, and each vertex's parent.

    The root is its own parent; unreached vertices have parent -1.
    """

    count: int
    parents: list[int]


def bfs(
    graph: Sequence[Sequence[int]],
    root: int,
    banned_edges: Iterable[tuple[int, int]] = (),
) -> BfsResult:
    """Breadth-first search over an adjacency list, skipping banned edges."""
    banned = set()
    for a, b in banned_edges:
        banned.add((a, b))
        banned.add((b, a))

    parents = [-1] * len(graph)
    parents[root] = root
    visited = [False] * len(graph)
    visited[root] = True
    queue = deque([root])
    count = 0
    while queue:
        current = queue.popleft()
        for neighbor in graph[current]:
            if (current, neighbor) in banned:
                continue
            if not visited[neighbor]:
                visited[neighbor] = True
                parents[neighbor] = current
                queue.append(neighbor)
                count += 1
    return BfsResult(count, parents)


def maximum_spanning_tree(
    view_graph: ViewGraph,
    images: dict[int, Image],
    weight_type: WeightType,
) -> tuple[int, dict[int, int]]:
    """Maximum spanning tree of the registered images.

    Returns the root image id and a map from image id to parent image id; the
    root is its own parent. Images the tree does not reach are left out.
    """
    index_of: dict[int, int] = {}
    image_ids: list[int] = []
    for image_id, image in images.items():
        if image.is_registered:
            index_of[image_id] = len(image_ids)
            image_ids.append(image_id)
    if not image_ids:
        raise ValueError("no registered images to span")

    def edge_weight(image_pair) -> float:
        if weight_type is WeightType.INLIER_RATIO:
            return float(image_pair.weight)
        return float(len(image_pair.inliers))

    valid_pairs = [p for p in view_graph.image_pairs.values() if p.is_valid]
    max_weight = max((edge_weight(p) for p in valid_pairs), default=0.0)
    max_weight = max(max_weight, 0.0)

    edges = []
    for image_pair in valid_pairs:
        image1 = images[image_pair.image_id1]
        image2 = images[image_pair.image_id2]
        if not (image1.is_registered and image2.is_registered):
            continue
        # Negated weights turn the minimum spanning tree into a maximum one.
        edges.append(
            (
                max_weight - edge_weight(image_pair),
                index_of[image_pair.image_id1],
                index_of[image_pair.image_id2],
            )
        )

    components = UnionFind()
    adjacency: list[list[int]] = [[] for _ in image_ids]
    for _, a, b in sorted(edges, key=lambda edge: edge[0]):
        if components.find(a) != components.find(b):
            components.union(a, b)
            adjacency[a].append(b)
            adjacency[b].append(a)

    result = bfs(adjacency, 0)
    parents = {
        image_ids[i]: image_ids[parent]
        for i, parent in enumerate(result.parents)
        if parent != -1
    }
    return image_ids[0], parents