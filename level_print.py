import sys
from collections.abc import Iterable
from typing import Any, Callable, Optional, TextIO

# Plain level-order rendering shared by both trees. A level is a sequence of slots: a key for a binary tree node, None
# for a missing binary tree node, or a tuple of keys for a multi-key node.


def format_levels(levels: Iterable[Iterable[Any]], empty_node_text: str = '  ', node_separator: str = '  ',
                  key_to_str: Callable[[Any], str] = str) -> list[str]:
    """Return one line of text per level.

    Every key is followed by a single space. A None slot is written as empty_node_text, and a multi-key node (a tuple)
    is followed by node_separator after its keys so adjacent nodes on a level stay apart.
    """
    lines = []
    for level in levels:
        parts = []
        for slot in level:
            if slot is None:
                parts.append(empty_node_text)
            elif isinstance(slot, tuple):
                parts.append(''.join(f'{key_to_str(key)} ' for key in slot) + node_separator)
            else:
                parts.append(f'{key_to_str(slot)} ')
        lines.append(''.join(parts))
    return lines


def print_levels(levels: Iterable[Iterable[Any]], file: Optional[TextIO] = None, **kwargs):
    """Print the lines of format_levels to file (stdout by default). Extra keyword arguments go to format_levels."""
    if file is None:
        file = sys.stdout
    for line in format_levels(levels, **kwargs):
        print(line, file=file)
