from glomap.union_find import UnionFind


def test_new_element_is_own_root():
    uf = UnionFind()
    assert uf.find(7) == 7


def test_union_joins_sets():
    uf = UnionFind()
    uf.union(1, 2)
    uf.union(3, 4)
    assert uf.find(1) == uf.find(2)
    assert uf.find(3) == uf.find(4)
    assert uf.find(1) != uf.find(3)
    uf.union(2, 4)
    assert uf.find(1) == uf.find(3)


def test_union_root_goes_to_second_argument():
    uf = UnionFind()
    uf.union(1, 2)
    assert uf.find(1) == 2


def test_clear_forgets_sets():
    uf = UnionFind()
    uf.union("a", "b")
    uf.clear()
    assert uf.find("a") == "a"
    assert uf.find("b") == "b"


def test_long_chain_without_recursion_limit():
    uf = UnionFind()
    for i in range(10000):
        uf.union(i, i + 1)
    assert uf.find(0) == 10000
    assert uf.find(5000) == uf.find(0)