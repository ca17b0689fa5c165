import bisect
from abc import abstractmethod
from collections.abc import Collection, Iterable
from typing import Any, Generic, Optional, Protocol, TypeVar

from level_print import print_levels


class ComparableKey(Protocol):
    @abstractmethod
    def __lt__(self, other: Any, /) -> bool: ...


T = TypeVar('T', bound=ComparableKey)


class Unchanged(Generic[T]):
    """Result of an insertion below a node that kept the node within two keys. node is the subtree root, unchanged."""
    __slots__ = ('node',)

    def __init__(self, node: 'TwoThreeNode[T]'):
        self.node = node


class Split(Generic[T]):
    """Result of an insertion that overfilled a node and split it. middle has to be inserted into the parent, with
    right as the new child just after left.
    """
    __slots__ = 'left', 'middle', 'right'

    def __init__(self, left: 'TwoThreeNode[T]', middle: T, right: 'TwoThreeNode[T]'):
        self.left = left
        self.middle = middle
        self.right = right


class TwoThreeNode(Generic[T]):
    __slots__ = 'keys', 'children'

    def __init__(self, keys: Optional[list[T]] = None, children: 'Optional[list[TwoThreeNode[T]]]' = None):
        # sorted; 1 or 2 keys, except for a moment during an insert (3 keys) or a remove (0 keys)
        self.keys: list[T] = keys if keys is not None else []
        # empty for a leaf, otherwise always one more child than keys
        self.children: 'list[TwoThreeNode[T]]' = children if children is not None else []

    def __str__(self):
        return f'{self.__class__.__name__}({self.keys})'

    def __repr__(self):
        return str(self)

    def is_leaf(self) -> bool:
        return not self.children

    def find_child_index(self, key: T) -> int:
        """Return the index of the child whose range holds key: the first i where key < keys[i], or the last child if
        key is greater than every key here.
        """
        for i, k in enumerate(self.keys):
            if key < k:
                return i
        return len(self.keys)

    def get_min_key(self) -> T:
        """Return the least key in this subtree (the first key of its leftmost leaf)."""
        node = self
        while not node.is_leaf():
            node = node.children[0]
        assert(node.keys)
        return node.keys[0]

    def sorted(self) -> Iterable[T]:
        """Return an iterator over the keys of this subtree in order."""
        if self.is_leaf():
            yield from self.keys
            return
        for child, key in zip(self.children, self.keys):
            yield from child.sorted()
            yield key
        yield from self.children[-1].sorted()

    def split(self) -> 'Split[T]':
        """Split an overfull node {k0, k1, k2} (children c0..c3 if internal) in two. This node keeps k0 (c0, c1), a new
        right sibling gets k2 (c2, c3), and k1 is handed back to go up into the parent.
        """
        assert(len(self.keys) == 3)
        k0, middle, k2 = self.keys
        right = self.__class__([k2], self.children[2:])
        self.keys = [k0]
        del self.children[2:]
        return Split(self, middle, right)

    def insert(self, key: T) -> 'Unchanged[T] | Split[T]':
        """Insert key into this subtree. The key must not already be in the subtree.

        Returns Unchanged(self) if this node still holds at most two keys, or the Split this node broke into.
        """
        if self.is_leaf():
            bisect.insort(self.keys, key)
        else:
            idx = self.find_child_index(key)
            result = self.children[idx].insert(key)
            if isinstance(result, Unchanged):
                return Unchanged(self)
            # the child kept its place as the left half; the promoted key and the right half go in just after it
            self.keys.insert(idx, result.middle)
            self.children.insert(idx + 1, result.right)
        if len(self.keys) > 2:
            return self.split()
        return Unchanged(self)

    def remove(self, key: T) -> bool:
        """Remove key from this subtree. Return True if the key was removed, False if it was not present.

        Any child left without keys is fixed before returning, but this node itself may be left without keys; the
        caller (the parent, or the tree for the root) has to fix that.
        """
        if key in self.keys:
            idx = self.keys.index(key)
            if self.is_leaf():
                del self.keys[idx]
                return True
            # replace the key with its in-order successor, then remove the successor from the leaf it came from
            successor = self.children[idx + 1].get_min_key()
            self.keys[idx] = successor
            idx += 1
            removed = self.children[idx].remove(successor)
            assert(removed)
        elif self.is_leaf():
            return False
        else:
            idx = self.find_child_index(key)
            if not self.children[idx].remove(key):
                return False
        if not self.children[idx].keys:
            self.rebalance(idx)
        return True

    def rebalance(self, idx: int):
        """Fix children[idx], which was left without keys. Borrow a key through this node from an adjacent sibling
        with two keys, preferring the left one; if neither sibling can spare a key, merge with a sibling instead.
        """
        if idx > 0 and len(self.children[idx - 1].keys) > 1:
            self.__borrow_from_left(idx)
        elif idx < len(self.children) - 1 and len(self.children[idx + 1].keys) > 1:
            self.__borrow_from_right(idx)
        elif idx > 0:
            self.merge(idx - 1)
        else:
            self.merge(idx)

    def __borrow_from_left(self, idx: int):
        #      [c e]                 [b e]
        #     /  |  \               /  |  \
        #  [a b] [] [f]    =>    [a]  [c] [f]
        child = self.children[idx]
        left = self.children[idx - 1]
        child.keys.insert(0, self.keys[idx - 1])
        self.keys[idx - 1] = left.keys.pop()
        if not left.is_leaf():
            child.children.insert(0, left.children.pop())

    def __borrow_from_right(self, idx: int):
        #      [b]                 [c]
        #     /   \               /   \
        #   []   [c d]    =>    [b]   [d]
        child = self.children[idx]
        right = self.children[idx + 1]
        child.keys.append(self.keys[idx])
        self.keys[idx] = right.keys.pop(0)
        if not right.is_leaf():
            child.children.append(right.children.pop(0))

    def merge(self, idx: int):
        """Merge children[idx + 1] into children[idx]. The left child absorbs the separating key keys[idx] and all of
        the right child's keys and children; the separating key and the right child are removed from this node.
        """
        if idx + 1 >= len(self.children):
            raise RuntimeError('Merged child has no right sibling')
        left = self.children[idx]
        right = self.children[idx + 1]
        left.keys.append(self.keys.pop(idx))
        left.keys.extend(right.keys)
        left.children.extend(right.children)
        del self.children[idx + 1]
        # the right node is no longer reachable; drop its links
        right.keys = []
        right.children = []

    def _calculate_leaf_depths(self, depth: int = 0) -> set[int]:
        """Return the set of depths at which leaves occur below this node. Walks the whole subtree, so this should only
        be used for testing.
        """
        if self.is_leaf():
            return {depth}
        return set().union(*(child._calculate_leaf_depths(depth + 1) for child in self.children))

    def _calculate_len(self) -> int:
        """Count the keys in this subtree by walking it. This should only be used for testing."""
        return len(self.keys) + sum(child._calculate_len() for child in self.children)


class TwoThreeTree(Collection, Generic[T]):
    """2-3 search tree. Every node holds one or two keys and every internal node has one child more than it has keys,
    with all leaves at the same depth. The tree grows in height only by splitting the root, and shrinks only when the
    root is merged away. Duplicate keys are ignored.
    """
    __slots__ = '_root', '_size'

    def __init__(self, init: Optional[Iterable[T]] = None):
        """Initialize the tree, optionally with an iterable of keys to initially insert."""
        self._root: 'TwoThreeNode[T] | None' = None
        self._size: int = 0
        if init:
            self.extend(init)

    def __len__(self):
        return self._size

    def __iter__(self):
        """Iterate over the keys in sorted order."""
        return iter(self.sorted())

    def __str__(self):
        return f'{self.__class__.__name__}({str(list(self))})'

    def __repr__(self):
        return str(self)

    def __contains__(self, x: T):
        return self.search(x)

    def __eq__(self, other):
        """Trees are equal if they hold the same keys (they need not have the same structure)."""
        if not isinstance(other, TwoThreeTree):
            return False
        return list(self) == list(other)

    @property
    def root(self) -> 'TwoThreeNode[T] | None':
        """The root node, or None if the tree is empty. For inspection only; mutate through the tree."""
        return self._root

    @property
    def height(self) -> int:
        """Number of levels in the tree; 0 when empty."""
        height = 0
        node = self._root
        while node is not None:
            height += 1
            node = node.children[0] if node.children else None
        return height

    def clear(self):
        """Removes all keys from the tree."""
        self._root = None
        self._size = 0

    def sorted(self) -> Iterable[T]:
        """Return a sorted iterator over the keys in the tree."""
        if self._root is not None:
            yield from self._root.sorted()

    def search(self, key: T) -> bool:
        """Return True if a key is in the tree. False if not."""
        node = self._root
        while node is not None:
            if key in node.keys:
                return True
            node = node.children[node.find_child_index(key)] if not node.is_leaf() else None
        return False

    def insert(self, key: T) -> bool:
        """Insert a key into the tree. Return True if the key was inserted, False if it was already present."""
        assert(key is not None)
        if self._root is None:
            self._root = TwoThreeNode([key])
            self._size = 1
            return True
        if self.search(key):
            return False
        result = self._root.insert(key)
        if isinstance(result, Split):
            # the root split; a new root above the two halves is the only way the tree gets taller
            self._root = TwoThreeNode([result.middle], [result.left, result.right])
        self._size += 1
        return True

    def remove(self, key: T) -> bool:
        """Remove a key from the tree. Return True if the key was removed, False if it was not present."""
        assert(key is not None)
        if self._root is None:
            return False
        if not self._root.remove(key):
            return False
        self._size -= 1
        if not self._root.keys:
            # an emptied internal root has exactly one child left, which takes its place; an emptied leaf root means
            # the tree is empty
            old_root = self._root
            self._root = old_root.children[0] if old_root.children else None
            old_root.children = []
        return True

    def extend(self, keys: Iterable[T]) -> int:
        """Add an iterable of keys to the tree. Returns the number of keys inserted."""
        inserted = 0
        for key in keys:
            inserted += int(self.insert(key))
        return inserted

    def traverse_levels(self) -> 'list[list[tuple[T, ...]]]':
        """Return the nodes level by level, top down, each node given as a tuple of its keys. An empty tree has no
        levels.
        """
        levels: 'list[list[tuple[T, ...]]]' = []
        next_level = [self._root] if self._root is not None else []
        while next_level:
            levels.append([tuple(node.keys) for node in next_level])
            next_level = [child for node in next_level for child in node.children]
        return levels

    def print(self, **kwargs):
        """Print the tree to console, one level per line, each node's keys space-separated. Takes the same keyword
        options as level_print.print_levels.
        """
        if self._root is None:
            print(str(self))
            return
        print_levels(self.traverse_levels(), **kwargs)

    @staticmethod
    def test(iters=1, iters_per_iter=1000, delete_prob=.3, print_time=True, print_tree=False):
        """Run randomized tests. Will throw an AssertionError if there is an error."""
        import random
        import time
        start_time = time.time()
        for _ in range(iters):
            vals: set[int] = set()
            tree: TwoThreeTree[int] = TwoThreeTree()
            # the tree should start out empty
            assert(len(tree) == 0)
            assert(tree.root is None)
            assert(tree.traverse_levels() == [])
            for _ in range(iters_per_iter):
                delete = random.random() <= delete_prob
                if delete:
                    if len(vals) > 0:
                        val = random.choice(tuple(vals))
                        assert(tree.remove(val))
                        vals.remove(val)
                else:
                    # a narrow range so duplicates and removals of internal keys happen often
                    val = random.randint(-1000, 1000)
                    already_exists = val in vals
                    assert(tree.insert(val) != already_exists)
                    vals.add(val)
            assert(len(tree) == len(vals))
            assert(tree.root is None or len(tree) == tree.root._calculate_len())
            assert(list(tree.sorted()) == sorted(vals))
            if tree.root is not None:
                # every leaf is at the same depth
                assert(tree.root._calculate_leaf_depths() == {tree.height - 1})
                to_check = [tree.root]
                while to_check:
                    node = to_check.pop()
                    assert(1 <= len(node.keys) <= 2)
                    assert(node.keys == sorted(node.keys))
                    assert(node.is_leaf() or len(node.children) == len(node.keys) + 1)
                    to_check.extend(node.children)
            assert(len(tree.traverse_levels()) == tree.height)
            if print_tree:
                tree.print()
            for val in vals:
                assert(not tree.insert(val))
                assert(val in tree)
                assert(tree.remove(val))
                assert(not tree.remove(val))
            # after removing everything, the tree should be empty
            assert(len(tree) == 0)
            assert(tree.root is None)
            assert(list(tree) == [])
            assert(bool(tree) == False)
        end_time = time.time()
        total_time = end_time - start_time
        if print_time:
            print(f'Test successful with {iters} iterations and {iters_per_iter} steps per iteration')
            print(f'Total time of {total_time:.2f}s and average time of {(total_time / iters):.2f}s per iteration')


if __name__ == '__main__':
    TwoThreeTree.test()
