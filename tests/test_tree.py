import pytest

from glomap.image import Image
from glomap.image_pair import ImagePair
from glomap.tree import WeightType, bfs, maximum_spanning_tree
from glomap.view_graph import ViewGraph


def test_bfs_path_graph():
    result = bfs([[1], [0, 2], [1]], 0)
    assert result.count == 2
    assert result.parents == [0, 0, 1]


def test_bfs_banned_edge_either_direction():
    graph = [[1], [0, 2], [1]]
    assert bfs(graph, 0, [(2, 1)]).parents == [0, 0, -1]
    assert bfs(graph, 0, [(1, 2)]).count == 1


def test_bfs_root_is_own_parent():
    result = bfs([[1], [0]], 1)
    assert result.parents == [1, 1]


def _graph(edges, registered=(1, 2, 3, 4)):
    images = {i: Image(i, 1, f"{i}.jpg", is_registered=i in registered) for i in (1, 2, 3, 4)}
    graph = ViewGraph()
    for a, b, inliers, weight in edges:
        pair = ImagePair(a, b)
        pair.inliers = list(range(inliers))
        pair.weight = weight
        graph.image_pairs[pair.pair_id] = pair
    return graph, images


EDGES = [(1, 2, 100, 0.1), (2, 3, 50, 0.2), (1, 3, 10, 0.9), (3, 4, 20, 0.5)]


def test_mst_by_inlier_number():
    graph, images = _graph(EDGES)
    root, parents = maximum_spanning_tree(graph, images, WeightType.INLIER_NUM)
    assert root == 1
    assert parents == {1: 1, 2: 1, 3: 2, 4: 3}


def test_mst_by_inlier_ratio():
    graph, images = _graph(EDGES)
    root, parents = maximum_spanning_tree(graph, images, WeightType.INLIER_RATIO)
    assert root == 1
    assert parents == {1: 1, 3: 1, 2: 3, 4: 3}


def test_mst_skips_unregistered_images():
    graph, images = _graph(EDGES, registered=(1, 2, 3))
    _, parents = maximum_spanning_tree(graph, images, WeightType.INLIER_NUM)
    assert set(parents) == {1, 2, 3}
    assert 4 not in parents.values()


def test_mst_skips_invalid_pairs():
    graph, images = _graph(EDGES)
    for pair in graph.image_pairs.values():
        if {pair.image_id1, pair.image_id2} == {2, 3}:
            pair.is_valid = False
    _, parents = maximum_spanning_tree(graph, images, WeightType.INLIER_NUM)
    assert parents[3] == 1
    assert parents[2] == 1


def test_mst_without_registered_images_raises():
    graph, images = _graph(EDGES, registered=())
    with pytest.raises(ValueError):
        maximum_spanning_tree(graph, images, WeightType.INLIER_NUM)