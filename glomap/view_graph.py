"""Graph of images connected by image pairs."""

from __future__ import annotations

from collections import deque

from glomap.image import Image
from glomap.image_pair import ImagePair


class ViewGraph:
    """Image pairs keyed by pair id, with connectivity helpers."""

    def __init__(self) -> None:
        self.image_pairs: dict[int, ImagePair] = {}
        self.num_images = 0
        self.num_pairs = 0
        self._adjacency_list: dict[int, set[int]] = {}
        self._connected_components: list[set[int]] = []

    def remove_invalid_pair(self, pair_id: int) -> None:
        """Mark a pair as invalid; raises KeyError for an unknown pair."""
        self.image_pairs[pair_id].is_valid = False

    def keep_largest_connected_components(self, images: dict[int, Image]) -> int:
        """Register only the images of the largest component.

        Pairs leaving that component become invalid. Returns the number of
        images in the largest component.
        """
        self.establish_adjacency_list()
        components = self._find_connected_components()

        largest: set[int] = set()
        for component in components:
            if len(component) > len(largest):
                largest = component
        if not largest:
            return 0

        for image in images.values():
            image.is_registered = False
        for image_id in largest:
            image = images.get(image_id)
            if image is not None:
                image.is_registered = True

        self.num_pairs = 0
        for image_pair in self.image_pairs.values():
            if not (
                _is_registered(images, image_pair.image_id1)
                and _is_registered(images, image_pair.image_id2)
            ):
                image_pair.is_valid = False
            if image_pair.is_valid:
                self.num_pairs += 1

        self.num_images = len(largest)
        return len(largest)

    def mark_connected_components(
        self, images: dict[int, Image], min_num_img: int = -1
    ) -> int:
        """Give images a cluster id, larger components first.

        Components with fewer than ``min_num_img`` images keep cluster id -1.
        Returns the number of clusters assigned.
        """
        self.establish_adjacency_list()
        components = self._find_connected_components()
        ranking = sorted(
            ((len(component), index) for index, component in enumerate(components)),
            reverse=True,
        )

        for image in images.values():
            image.cluster_id = -1

        num_clusters = 0
        for size, index in ranking:
            if size < min_num_img:
                break
            for image_id in components[index]:
                image = images.get(image_id)
                if image is not None:
                    image.cluster_id = num_clusters
            num_clusters += 1
        return num_clusters

    def establish_adjacency_list(self) -> None:
        """Rebuild the neighbour sets from the valid pairs."""
        adjacency: dict[int, set[int]] = {}
        for image_pair in self.image_pairs.values():
            if image_pair.is_valid:
                adjacency.setdefault(image_pair.image_id1, set()).add(image_pair.image_id2)
                adjacency.setdefault(image_pair.image_id2, set()).add(image_pair.image_id1)
        self._adjacency_list = adjacency

    def adjacency_list(self) -> dict[int, set[int]]:
        """Neighbour sets as last built by ``establish_adjacency_list``."""
        return self._adjacency_list

    def _find_connected_components(self) -> list[set[int]]:
        visited: set[int] = set()
        components: list[set[int]] = []
        for image_id in self._adjacency_list:
            if image_id not in visited:
                components.append(self._bfs(image_id, visited))
        self._connected_components = components
        return components

    def _bfs(self, root: int, visited: set[int]) -> set[int]:
        component = {root}
        visited.add(root)
        queue = deque([root])
        while queue:
            current = queue.popleft()
            for neighbor in self._adjacency_list.get(current, ()):
                if neighbor not in visited:
                    visited.add(neighbor)
                    component.add(neighbor)
                    queue.append(neighbor)
        return component


def _is_registered(images: dict[int, Image], image_id: int) -> bool:
    image = images.get(image_id)
    return image is not None and image.is_registered