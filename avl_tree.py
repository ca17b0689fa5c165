import math
import shutil
from abc import abstractmethod
from collections.abc import Collection, Iterable
from typing import Any, Generic, Optional, Protocol, TypeVar


class ComparableKey(Protocol):
    @abstractmethod
    def __lt__(self, other: Any, /) -> bool: ...


T = TypeVar('T', bound=ComparableKey)


class AvlTreeNode(Collection, Generic[T]):
    __slots__ = 'key', 'left', 'right', 'height', 'size'

    def __init__(self, key: T):
        self.key: T = key
        # each node owns its children; there are no parent links, so rotations hand back the new subtree root and the
        # caller re-links it
        self.left: 'None | AvlTreeNode[T]' = None
        self.right: 'None | AvlTreeNode[T]' = None
        # number of nodes on the longest downward path; a leaf has height 1 and an empty subtree has height 0
        self.height: int = 1
        # number of keys in the subtree rooted here
        self.size: int = 1

    def __str__(self):
        return f'{self.__class__.__name__}({self.key})'

    def __repr__(self):
        return str(self)

    def __len__(self):
        return self.size

    def __iter__(self):
        stack: 'list[AvlTreeNode[T]]' = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(node.get_children())

    def __contains__(self, x: T):
        return self.search(x) is not None

    def __rotate_l(self) -> 'AvlTreeNode[T]':
        """Perform a left rotation rooted at self. Will fail if self has no right child.

        Returns the new root of this subtree (the former right child).
        """
        # the right node becomes the new root, and its left subtree becomes the old root's new right subtree
        #    *A                  C
        #   B   C      =>     *A   G
        #  D E F G            B F
        #                    D E
        # changed height: A (self), C (r)
        r = self.right
        assert(r is not None)
        self.right = r.left
        r.left = self
        self._update_node_metadata()
        r._update_node_metadata()
        return r

    def __rotate_r(self) -> 'AvlTreeNode[T]':
        """Perform a right rotation rooted at self. Will fail if self has no left child.

        Returns the new root of this subtree (the former left child).
        """
        # the left node becomes the new root, and its right subtree becomes the old root's new left subtree
        #    *A                  B
        #   B   C      =>      D  *A
        #  D E F G                E  C
        #                            F G
        # changed height: A (self), B (l)
        l = self.left
        assert(l is not None)
        self.left = l.right
        l.right = self
        self._update_node_metadata()
        l._update_node_metadata()
        return l

    def __rotate_lr(self) -> 'AvlTreeNode[T]':
        """Left rotate the left child, then right rotate self. Used when self is left heavy and its left subtree is right
        heavy.

        Returns the new root of this subtree.
        """
        assert(self.left is not None)
        self.left = self.left.__rotate_l()
        return self.__rotate_r()

    def __rotate_rl(self) -> 'AvlTreeNode[T]':
        """Right rotate the right child, then left rotate self. Used when self is right heavy and its right subtree is
        left heavy.

        Returns the new root of this subtree.
        """
        assert(self.right is not None)
        self.right = self.right.__rotate_r()
        return self.__rotate_l()

    def __fix_balance_after_insert(self, key: T) -> 'AvlTreeNode[T]':
        """Restore balance at this node after key was inserted somewhere below it. The side the new key went down
        decides between a single and a double rotation. Heights of self and its children must already be accurate.

        Returns the new root of this subtree.
        """
        balance = self.get_balance()
        # a child on the heavy side has height >= 2, so it can't be the new leaf and its key differs from key
        if balance > 1 and key < self.left.key:
            return self.__rotate_r()
        if balance < -1 and key > self.right.key:
            return self.__rotate_l()
        if balance > 1 and key > self.left.key:
            return self.__rotate_lr()
        if balance < -1 and key < self.right.key:
            return self.__rotate_rl()
        return self

    def __fix_balance_after_remove(self) -> 'AvlTreeNode[T]':
        """Restore balance at this node after a removal below it. There is no new key to follow, so the balance of the
        heavy child decides between a single and a double rotation.

        Returns the new root of this subtree.
        """
        balance = self.get_balance()
        if balance > 1:
            if self.left.get_balance() >= 0:
                return self.__rotate_r()
            return self.__rotate_lr()
        if balance < -1:
            if self.right.get_balance() <= 0:
                return self.__rotate_l()
            return self.__rotate_rl()
        return self

    def _update_node_metadata(self):
        """Recompute this node's height and size from its children. Assumes the children's fields are valid."""
        children = self.get_children()
        self.height = max((n.height for n in children), default=0) + 1
        self.size = sum(n.size for n in children) + 1

    def _calculate_height(self) -> int:
        """Returns the number of levels in the subtree rooted at this node by walking it. This does not use the height
        field and should only be used for testing.
        """
        depth = 0
        next_level = [self]
        while next_level:
            depth += 1
            next_level = [n for node in next_level for n in node.get_children()]
        return depth

    def _calculate_balance(self) -> int:
        """Calculate the balance of this node by walking its subtrees. This should only be used for testing."""
        return (self.left._calculate_height() if self.left is not None else 0) - (self.right._calculate_height() if self.right is not None else 0)

    def _calculate_len(self) -> int:
        """Count the keys in the subtree rooted at this node by walking it. This should only be used for testing."""
        return sum(1 for _ in self)

    def get_balance(self) -> int:
        """Get the balance of this node from the heights of its children. The convention is left height - right height,
        so a positive balance is left heavy and a negative balance is right heavy. A balanced node is -1, 0, or 1.
        """
        return (self.left.height if self.left is not None else 0) - (self.right.height if self.right is not None else 0)

    def get_children(self) -> tuple['AvlTreeNode[T]', ...]:
        """Get a tuple of this node's children. May have 0, 1, or 2 elements, always in (left, right) order."""
        return tuple(i for i in [self.left, self.right] if i is not None)

    def get_min(self) -> 'AvlTreeNode[T]':
        """Return the node holding the least key in this subtree."""
        node = self
        while node.left is not None:
            node = node.left
        return node

    def sorted(self) -> 'Iterable[AvlTreeNode[T]]':
        """Return an iterator over the nodes of this subtree in key order."""
        stack: 'list[AvlTreeNode[T]]' = []
        node: 'AvlTreeNode[T] | None' = self
        # go as far left as possible, then yield and continue with the right subtree
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node
            node = node.right

    def search(self, key: T) -> 'AvlTreeNode[T] | None':
        """Return the node holding key in this subtree, or None if it is not present."""
        node: 'AvlTreeNode[T] | None' = self
        while node is not None:
            if key == node.key:
                return node
            # lesser keys are always in the left subtree, greater keys in the right subtree
            node = node.left if key < node.key else node.right
        return None

    def insert(self, key: T) -> tuple['AvlTreeNode[T]', bool]:
        """Insert key into the subtree rooted at this node.

        Returns (new_root, inserted), where new_root takes this node's place in its parent (it is a different node only
        if a rotation happened here), and inserted is False if the key was already present.
        """
        if key == self.key:
            return (self, False)
        if key < self.key:
            if self.left is None:
                self.left = self.__class__(key)
                inserted = True
            else:
                self.left, inserted = self.left.insert(key)
        else:
            if self.right is None:
                self.right = self.__class__(key)
                inserted = True
            else:
                self.right, inserted = self.right.insert(key)
        if not inserted:
            # nothing changed below, so no height changed either
            return (self, False)
        self._update_node_metadata()
        return (self.__fix_balance_after_insert(key), True)

    def remove(self, key: T) -> tuple['AvlTreeNode[T] | None', bool]:
        """Remove key from the subtree rooted at this node.

        Returns (new_root, removed), where new_root takes this node's place in its parent (None if the subtree is now
        empty), and removed is False if the key was not present.
        """
        if key < self.key:
            if self.left is None:
                return (self, False)
            self.left, removed = self.left.remove(key)
        elif key > self.key:
            if self.right is None:
                return (self, False)
            self.right, removed = self.right.remove(key)
        elif self.left is None or self.right is None:
            # zero or one child: that child (possibly None) takes this node's place, and this node is unlinked
            child = self.left if self.left is not None else self.right
            self.left = None
            self.right = None
            return (child, True)
        else:
            # two children: copy the in-order successor's key here, then remove the successor from the right subtree
            # where it still lives; the successor has no left child, so that removal takes the branch above
            successor_key = self.right.get_min().key
            self.key = successor_key
            self.right, removed = self.right.remove(successor_key)
            assert(removed)
        if not removed:
            return (self, False)
        self._update_node_metadata()
        return (self.__fix_balance_after_remove(), True)


class AvlTree(Collection, Generic[T]):
    """Self-balancing binary search tree. After every insertion or removal the height of the two subtrees of any node
    differ by at most one, so searches, insertions and removals are O(log n). Duplicate keys are ignored.
    """
    __slots__ = ('_root',)

    def __init__(self, init: Optional[Iterable[T]] = None):
        """Initialize the tree, optionally with an iterable of keys to initially insert."""
        self._root: 'AvlTreeNode[T] | None' = None
        if init:
            self.extend(init)

    def __len__(self):
        """The size of the tree is kept in the root, so this is a constant time operation."""
        return len(self._root) if self._root is not None else 0

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
        if not isinstance(other, AvlTree):
            return False
        return list(self) == list(other)

    @property
    def root(self) -> 'AvlTreeNode[T] | None':
        """The root node, or None if the tree is empty. For inspection only; mutate through the tree."""
        return self._root

    @property
    def height(self) -> int:
        """Number of levels in the tree; 0 when empty."""
        return self._root.height if self._root is not None else 0

    def clear(self):
        """Removes all keys from the tree."""
        self._root = None

    def sorted(self) -> Iterable[T]:
        """Return a sorted iterator over the keys in the tree."""
        if self._root is not None:
            for node in self._root.sorted():
                yield node.key

    def insert(self, key: T) -> bool:
        """Insert a key into the tree. Return True if the key was inserted, False if it was already present."""
        assert(key is not None)
        if self._root is None:
            self._root = AvlTreeNode(key)
            return True
        self._root, inserted = self._root.insert(key)
        return inserted

    def remove(self, key: T) -> bool:
        """Remove a key from the tree. Return True if the key was removed, False if it was not present."""
        assert(key is not None)
        if self._root is None:
            return False
        self._root, removed = self._root.remove(key)
        return removed

    def search(self, key: T) -> bool:
        """Return True if a key is in the tree. False if not."""
        return self._root is not None and self._root.search(key) is not None

    def extend(self, keys: Iterable[T]) -> int:
        """Add an iterable of keys to the tree. Returns the number of keys inserted."""
        inserted = 0
        for key in keys:
            inserted += int(self.insert(key))
        return inserted

    def traverse_levels(self) -> 'list[list[T | None]]':
        """Return the keys level by level, top down. Missing children are kept as None placeholders, so level i always
        has 2**i slots. Stops at the deepest level holding a real node; an empty tree has no levels.
        """
        levels: 'list[list[T | None]]' = []
        next_level: 'list[AvlTreeNode[T] | None]' = [self._root] if self._root is not None else []
        while any(next_level):
            this_level = next_level
            next_level = []
            for node in this_level:
                if node is None:
                    next_level.extend([None, None])
                else:
                    next_level.extend((node.left, node.right))
            levels.append([node.key if node is not None else None for node in this_level])
        return levels

    def print(self, max_width=None, min_chars_per_node=3, empty_node_text='<>', key_to_str=str):
        """Try to print the tree to console in a human-readable format as space allows. Printing stops when the entire
        tree has been printed, or there is no longer enough space available to reasonably print a line.

        max_width is the amount of space available to print each line; None (the default) uses the current console
        width.

        min_chars_per_node is the minimum amount of space to have in a line for each node. When this can no longer be
        satisfied, stop printing.

        empty_node_text is what to print as a placeholder for a node that doesn't exist (i.e. it's parent doesn't have a
        child in this slot).
        """
        if max_width is None:
            max_width = shutil.get_terminal_size((120, 24)).columns
        MIN_WIDTH = 8
        if max_width < MIN_WIDTH:
            print(f'Can\'t print tree; available width of {max_width} needs to be at least {MIN_WIDTH}')
            return
        # sometimes there's some extra space written off the end of a line
        max_width -= 1
        if self._root is None:
            print(str(self))
            return
        TRUNCATE_TEXT = '..'
        ARROW_CHARS: tuple[str, str] = ('/', '\\')
        if min_chars_per_node < len(TRUNCATE_TEXT):
            print(f'Can\'t print tree; min chars per node {min_chars_per_node} needs to be at least {len(TRUNCATE_TEXT)}')
            return
        for current_level, level in enumerate(self.traverse_levels()):
            node_count = len(level)
            total_spaces_between_nodes = node_count - 1
            space_per_node = ((max_width - total_spaces_between_nodes) / node_count)
            temp = math.floor(space_per_node)
            unused_space_per_node = space_per_node - temp
            space_per_node = temp
            arrow_left_align_space = (space_per_node - len(ARROW_CHARS[0])) // 2
            arrow_right_align_space = (space_per_node - len(ARROW_CHARS[0])) - arrow_left_align_space
            # end early and indicate that there's more below; there are too many nodes to effectively print any further
            if space_per_node < min_chars_per_node:
                print(f'{"...": ^{max_width}}')
                break
            to_print = []
            accumulated_space = 0.0
            for idx, key in enumerate(level):
                # don't add the extra space for the last node
                space_after = '' if idx == len(level) - 1 else ' '
                if accumulated_space >= 1.0:
                    extra_space = 1
                    accumulated_space -= 1.0
                else:
                    extra_space = 0
                node_text = empty_node_text if key is None else key_to_str(key)
                # truncate node text that is too long
                if len(node_text) > space_per_node:
                    node_text = node_text[:space_per_node - len(TRUNCATE_TEXT)] + TRUNCATE_TEXT
                # for all but the first line, print arrows pointing to the nodes on the next line first
                if current_level != 0:
                    # alternate printing left and right arrows (0=left, 1=right)
                    side = idx % 2
                    if key is not None:
                        left_align_char = ' ' if side == 0 else '-'
                        right_align_char = '-' if side == 0 else ' '
                        arrow_text = left_align_char * (arrow_left_align_space + extra_space) + ARROW_CHARS[side] + right_align_char * arrow_right_align_space + space_after
                    else:
                        # blank entry with just spaces to align later arrows
                        arrow_text = ' ' * (space_per_node + extra_space) + space_after
                    print(arrow_text, end='')
                to_print.append(f'{node_text: ^{space_per_node + extra_space}}{space_after}')
                accumulated_space += unused_space_per_node
            # now end the line of arrows and print the next line of nodes
            print('')
            print(''.join(to_print))

    @staticmethod
    def test(iters=1, iters_per_iter=1000, delete_prob=.1, print_time=True, print_tree=False):
        """Run randomized tests. Will throw an AssertionError if there is an error."""
        import random
        import time
        start_time = time.time()
        for _ in range(iters):
            vals: set[int] = set()
            tree: AvlTree[int] = AvlTree()
            # the tree should start out empty
            assert(len(tree) == 0)
            assert(tree.root is None)
            assert(tree.traverse_levels() == [])
            # insert and delete a group of keys, adding them both to the tree and to a set
            for _ in range(iters_per_iter):
                delete = random.random() <= delete_prob
                if delete:
                    if len(vals) > 0:
                        # making a random choice from a set is a O(N) operation, so this is inefficient
                        # but for a test, it's fine
                        val = random.choice(tuple(vals))
                        assert(tree.remove(val))
                        vals.remove(val)
                else:
                    val = random.randint(-100000, 100000)
                    already_exists = val in vals
                    assert(tree.insert(val) != already_exists)
                    vals.add(val)
            # they should now have the same number of elements and when sorted should be the same
            assert(len(tree) == len(vals))
            assert(tree.root is None or len(tree) == tree.root._calculate_len())
            assert(list(tree.sorted()) == sorted(vals))
            if tree.root is not None:
                seen_vals: set[int] = set()
                for el in tree.root:
                    # the balance should be -1, 0, or 1, the calculated balance and balance from height should match
                    balance = el.get_balance()
                    assert(balance == el._calculate_balance())
                    assert(abs(balance) <= 1)
                    # keys are ordered around each node and there are no duplicates
                    assert(el.left is None or el.left.key < el.key)
                    assert(el.right is None or el.key < el.right.key)
                    assert(el.key not in seen_vals)
                    # the size and height of each node should be correct
                    assert(len(el) == el._calculate_len())
                    assert(el.height == el._calculate_height())
                    seen_vals.add(el.key)
            levels = tree.traverse_levels()
            assert(len(levels) == tree.height)
            assert(all(len(level) == 2 ** i for i, level in enumerate(levels)))
            if print_tree:
                tree.print()
            for val in vals:
                # the key should not be inserted again (since it already exists)
                # the key should be found, and be able to be removed
                assert(not tree.insert(val))
                assert(val in tree)
                assert(tree.search(val))
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
    AvlTree.test()
