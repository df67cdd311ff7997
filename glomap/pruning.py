"""Pruning of images that are only weakly tied to the reconstruction."""

from __future__ import annotations

import logging
from collections import Counter

from glomap.image import Image, Track
from glomap.image_pair import ImagePair, image_pair_to_pair_id, pair_id_to_image_pair
from glomap.view_graph import ViewGraph
from glomap.view_graph_manipulation import StrongClusterCriteria, establish_strong_clusters

logger = logging.getLogger(__name__)

# A relative pose is only fixed by at least this many shared points.
_MIN_COVISIBLE_POINTS = 5


def prune_weakly_connected_images(
    images: dict[int, Image],
    tracks: dict[int, Track],
    min_num_images: int = 2,
    min_num_observations: int = 0,
) -> int:
    """Cluster images by how many tracks they share and mark the clusters.

    Only tracks with more than two observations count. Returns the number of
    clusters; raises ValueError when no pair of images shares enough points.
    """
    pair_covisibility: Counter[int] = Counter()
    observation_count: Counter[int] = Counter()
    for track in tracks.values():
        observations = track.observations
        if len(observations) <= 2:
            continue
        for i, (image_id1, _) in enumerate(observations):
            observation_count[image_id1] += 1
            for image_id2, _ in observations[i + 1 :]:
                if image_id1 == image_id2:
                    continue
                pair_covisibility[image_pair_to_pair_id(image_id1, image_id2)] += 1

    counter = 0
    visibility_graph = ViewGraph()
    pair_count: list[int] = []
    for pair_id, count in pair_covisibility.items():
        if count < _MIN_COVISIBLE_POINTS:
            continue
        counter += 1
        image_id1, image_id2 = pair_id_to_image_pair(pair_id)
        if (
            observation_count[image_id1] < min_num_observations
            or observation_count[image_id2] < min_num_observations
        ):
            continue
        visibility_graph.image_pairs[pair_id] = ImagePair(
            image_id1=image_id1, image_id2=image_id2, is_valid=True, weight=float(count)
        )
        pair_count.append(count)
    logger.info("Established visibility graph with %d pairs", counter)

    if not pair_count:
        raise ValueError("no image pairs share enough points to build a visibility graph")

    pair_count.sort()
    median_count = float(pair_count[len(pair_count) // 2])
    deviations = sorted(abs(count - median_count) for count in pair_count)
    median_deviation = deviations[len(deviations) // 2]

    threshold = median_count - median_deviation
    logger.info("Threshold for Strong Clustering: %s", threshold)

    return establish_strong_clusters(
        visibility_graph,
        images,
        StrongClusterCriteria.WEIGHT,
        max(threshold, 20.0),
        min_num_images,
    )