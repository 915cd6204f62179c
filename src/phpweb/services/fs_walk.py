"""Error-tolerant directory traversal driven by a visitor."""

import os
from enum import Enum
from pathlib import Path
from typing import Callable, NamedTuple


class WalkAction(Enum):
    """What the walk should do after the visitor has seen a node."""

    CONTINUE = "continue"
    SKIP = "skip"  # don't descend into this directory
    STOP = "stop"  # end the whole walk


class WalkEntry(NamedTuple):
    """A node handed to the visitor.

    `error` is set when the directory at `path` could not be listed; in that
    case `is_dir` is True and the visitor decides whether to skip or stop.
    """

    path: Path
    is_dir: bool
    is_file: bool
    error: OSError | None = None


Visitor = Callable[[WalkEntry], WalkAction]


def walk_tree(root: Path, visitor: Visitor) -> bool:
    """Walk `root` depth-first, visiting entries in lexicographic name order.

    Symlinked directories are reported but never descended into.

    Returns:
        True if the visitor stopped the walk, False if it ran to completion.

    Raises:
        OSError: If `root` itself is missing, not a directory or cannot be listed
    """
    root = Path(root)
    if not root.is_dir():
        raise NotADirectoryError(f"not a directory: {root}")

    action = visitor(WalkEntry(path=root, is_dir=True, is_file=False))
    if action is WalkAction.STOP:
        return True
    if action is WalkAction.SKIP:
        return False
    # Only listing errors below the root go to the visitor
    return _visit_entries(_list_dir(root), visitor)


def _list_dir(directory: Path) -> list[os.DirEntry]:
    with os.scandir(directory) as it:
        return sorted(it, key=lambda e: e.name)


def _walk_dir(directory: Path, visitor: Visitor) -> bool:
    try:
        entries = _list_dir(directory)
    except OSError as e:
        action = visitor(WalkEntry(path=directory, is_dir=True, is_file=False, error=e))
        return action is WalkAction.STOP
    return _visit_entries(entries, visitor)


def _visit_entries(entries: list[os.DirEntry], visitor: Visitor) -> bool:
    for entry in entries:
        path = Path(entry.path)
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = entry.is_file()
        except OSError as e:
            action = visitor(WalkEntry(path=path, is_dir=False, is_file=False, error=e))
            if action is WalkAction.STOP:
                return True
            continue

        action = visitor(WalkEntry(path=path, is_dir=is_dir, is_file=is_file))
        if action is WalkAction.STOP:
            return True
        if action is WalkAction.SKIP or not is_dir:
            continue
        if _walk_dir(path, visitor):
            return True

    return False
