import sys
from collections.abc import Iterable, Iterator
from typing import Optional, TextIO

from avl_tree import AvlTree
from level_print import print_levels
from two_three_tree import TwoThreeTree

END_OF_INPUT = -1
MENU = '\nChoose an operation:\n1. Insert\n2. Delete\n3. Show AVL tree\n4. Show 2-3 tree\n5. Quit'
INSERT, DELETE, SHOW_AVL, SHOW_TWO_THREE, QUIT = range(1, 6)


def _tokens(lines: Iterable[str]) -> Iterator[str]:
    """Yield whitespace separated tokens, so values may be given on one line or many."""
    for line in lines:
        yield from line.split()


def _parse_int(token: Optional[str]) -> Optional[int]:
    if token is None:
        return None
    try:
        return int(token)
    except ValueError:
        return None


def run(stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> tuple[AvlTree[int], TwoThreeTree[int]]:
    """Fill an AVL tree and a 2-3 tree with the integers read from stdin up to -1, then loop on the menu until quit or
    the end of input. Invalid input is reported and skipped; it never reaches the trees.

    Returns both trees as they were when the loop ended.
    """
    if stdin is None:
        stdin = sys.stdin
    if stdout is None:
        stdout = sys.stdout
    avl: AvlTree[int] = AvlTree()
    two_three: TwoThreeTree[int] = TwoThreeTree()
    tokens = _tokens(stdin)

    print('Enter integers (end with -1):', file=stdout)
    for token in tokens:
        val = _parse_int(token)
        if val is None:
            print(f'Ignoring invalid value {token!r}', file=stdout)
            continue
        if val == END_OF_INPUT:
            break
        avl.insert(val)
        two_three.insert(val)

    while True:
        print(MENU, file=stdout)
        token = next(tokens, None)
        if token is None:
            break
        choice = _parse_int(token)
        if choice == QUIT:
            break
        if choice in (INSERT, DELETE):
            print('Value to insert: ' if choice == INSERT else 'Value to delete: ', end='', file=stdout)
            token = next(tokens, None)
            if token is None:
                break
            val = _parse_int(token)
            if val is None:
                print(f'\nInvalid value {token!r}.', file=stdout)
            elif choice == INSERT:
                avl.insert(val)
                two_three.insert(val)
            else:
                avl.remove(val)
                two_three.remove(val)
        elif choice == SHOW_AVL:
            print('\nAVL tree (level order):', file=stdout)
            print_levels(avl.traverse_levels(), file=stdout)
        elif choice == SHOW_TWO_THREE:
            print('\n2-3 tree (level order):', file=stdout)
            print_levels(two_three.traverse_levels(), file=stdout)
        else:
            print('Invalid option.', file=stdout)
    return avl, two_three


def main():
    run()


if __name__ == '__main__':
    main()
