import random

import pytest

from avl_tree import AvlTree, AvlTreeNode


def height(node):
    if node is None:
        return 0
    return 1 + max(height(node.left), height(node.right))


def check_node(node, low=None, high=None):
    if node is None:
        return 0
    assert low is None or low < node.key
    assert high is None or node.key < high
    size = 1 + check_node(node.left, low, node.key) + check_node(node.right, node.key, high)
    assert node.size == size
    assert node.height == height(node)
    assert abs(height(node.left) - height(node.right)) <= 1
    return size


def check_tree(tree):
    assert check_node(tree.root) == len(tree)
    keys = list(tree)
    assert keys == sorted(set(keys))


def shape(node):
    if node is None:
        return None
    return (node.key, shape(node.left), shape(node.right))


def test_empty():
    tree = AvlTree()
    assert len(tree) == 0
    assert tree.root is None
    assert tree.height == 0
    assert tree.traverse_levels() == []
    assert list(tree) == []
    assert 1 not in tree
    assert not tree.remove(1)


def test_rr_rotation():
    tree = AvlTree([10, 20, 30])
    assert shape(tree.root) == (20, (10, None, None), (30, None, None))
    assert tree.traverse_levels() == [[20], [10, 30]]


def test_ll_rotation():
    tree = AvlTree([30, 20, 10])
    assert shape(tree.root) == (20, (10, None, None), (30, None, None))


@pytest.mark.parametrize('keys', [[30, 10, 20], [10, 30, 20]], ids=['lr', 'rl'])
def test_double_rotation(keys):
    tree = AvlTree(keys)
    assert shape(tree.root) == (20, (10, None, None), (30, None, None))


def test_ascending_inserts_build_perfect_tree():
    tree = AvlTree(range(1, 8))
    assert tree.height == 3
    assert tree.traverse_levels() == [[4], [2, 6], [1, 3, 5, 7]]
    check_tree(tree)


def test_levels_keep_missing_children():
    tree = AvlTree([10, 20])
    assert tree.traverse_levels() == [[10], [None, 20]]
    tree = AvlTree([20, 10, 30, 5])
    assert tree.traverse_levels() == [[20], [10, 30], [5, None, None, None]]


def test_levels_are_restartable():
    tree = AvlTree([3, 1, 2])
    assert tree.traverse_levels() == tree.traverse_levels()


def test_remove_leaf_rotates_left():
    tree = AvlTree([20, 10, 30, 40])
    assert tree.remove(10)
    assert shape(tree.root) == (30, (20, None, None), (40, None, None))


def test_remove_leaf_rotates_right():
    tree = AvlTree([20, 10, 30, 5])
    assert tree.remove(30)
    assert shape(tree.root) == (10, (5, None, None), (20, None, None))


def test_remove_leaf_double_rotation():
    tree = AvlTree([20, 10, 30, 25])
    assert tree.remove(10)
    assert shape(tree.root) == (25, (20, None, None), (30, None, None))
    tree = AvlTree([20, 10, 30, 15])
    assert tree.remove(30)
    assert shape(tree.root) == (15, (10, None, None), (20, None, None))


def test_remove_node_with_two_children_uses_successor():
    tree = AvlTree([20, 10, 30])
    assert tree.remove(20)
    assert shape(tree.root) == (30, (10, None, None), None)
    assert tree.traverse_levels() == [[30], [10, None]]


def test_remove_node_with_one_child():
    tree = AvlTree([20, 10, 30, 40])
    assert tree.remove(30)
    assert shape(tree.root) == (20, (10, None, None), (40, None, None))


def test_remove_last_key_empties_tree():
    tree = AvlTree([1])
    assert tree.remove(1)
    assert tree.root is None
    assert len(tree) == 0


def test_removed_node_is_unlinked():
    tree = AvlTree([20, 10, 30, 25])
    node = tree.root.right
    assert node.key == 30
    assert tree.remove(30)
    assert node.left is None and node.right is None
    assert all(n is not node for n in tree.root)


def test_duplicate_insert_is_noop():
    tree = AvlTree([50, 20, 70, 10, 30])
    before = shape(tree.root)
    assert not tree.insert(30)
    assert shape(tree.root) == before
    assert len(tree) == 5


def test_remove_absent_key_is_noop():
    tree = AvlTree([50, 20, 70])
    before = shape(tree.root)
    assert not tree.remove(60)
    assert shape(tree.root) == before


def test_insert_then_remove_restores_keys():
    tree = AvlTree([8, 3, 10, 1, 6, 14, 4, 7, 13])
    before = list(tree)
    assert tree.insert(5)
    assert tree.remove(5)
    assert list(tree) == before


def test_collection_protocol():
    tree = AvlTree([3, 1, 2, 3])
    assert len(tree) == 3
    assert 2 in tree
    assert tree.search(1)
    assert not tree.search(4)
    assert list(tree) == [1, 2, 3]
    assert str(tree) == 'AvlTree([1, 2, 3])'
    assert tree == AvlTree([2, 3, 1])
    assert tree != AvlTree([1, 2])
    assert tree.extend([3, 4, 5]) == 2
    tree.clear()
    assert len(tree) == 0 and tree.root is None


def test_node_helpers():
    tree = AvlTree(range(10))
    root = tree.root
    assert isinstance(root, AvlTreeNode)
    assert root.get_min().key == 0
    assert [n.key for n in root.sorted()] == list(range(10))
    assert root.search(7).key == 7
    assert root.search(11) is None
    assert root._calculate_height() == root.height
    assert root._calculate_balance() == root.get_balance()


@pytest.mark.parametrize('seed', range(5))
def test_random_operations_keep_invariants(seed):
    rng = random.Random(seed)
    tree = AvlTree()
    vals = set()
    for _ in range(400):
        val = rng.randint(0, 200)
        if rng.random() < 0.35:
            assert tree.remove(val) == (val in vals)
            vals.discard(val)
        else:
            assert tree.insert(val) == (val not in vals)
            vals.add(val)
        check_tree(tree)
    assert list(tree) == sorted(vals)


def test_print(capsys):
    AvlTree([20, 10, 30]).print(max_width=40)
    out = capsys.readouterr().out
    assert '20' in out and '10' in out and '30' in out
    assert '/' in out and '\\' in out
    AvlTree().print(max_width=40)
    assert capsys.readouterr().out == 'AvlTree([])\n'


def test_self_check():
    AvlTree.test(iters=2, iters_per_iter=500, print_time=False)
