"""
File Discovery
Recursive, symlink-safe lookup of source files by extension
"""

import asyncio
import os
import posixpath
from typing import Iterable, List, Optional, Set, Union

# Directories that never contain loadable definitions
IGNORED_DIRS = frozenset({"node_modules", "__pycache__", "site-packages", "venv"})


def _normalize_exts(ext: Union[str, Iterable[str]]) -> List[str]:
    exts = [ext] if isinstance(ext, str) else list(ext)
    return [(e if e.startswith(".") else f".{e}").lower() for e in exts]


def _walk(directory: str, exts: List[str], base_dir: str, visited: Set[str]) -> List[str]:
    resolved = os.path.realpath(directory)
    if resolved in visited:
        return []
    visited.add(resolved)

    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError:
        return []

    results: List[str] = []
    for entry in entries:
        if entry.name.startswith(".") or entry.name in IGNORED_DIRS:
            continue

        try:
            is_dir = entry.is_dir()
            is_file = not is_dir and entry.is_file()
        except OSError:
            continue

        if is_dir:
            results.extend(_walk(entry.path, exts, base_dir, visited))
        elif is_file and entry.name.lower().endswith(tuple(exts)):
            relative = os.path.relpath(entry.path, base_dir)
            results.append(posixpath.normpath(relative.replace(os.sep, "/")))

    return results


def get_file_paths(
    directory: str,
    ext: Union[str, Iterable[str]],
    base_dir: Optional[str] = None,
) -> List[str]:
    """
    Collect files under a directory whose names end with one of the extensions.

    Hidden entries and dependency directories are skipped. Each canonical
    directory is visited once, so symlink cycles terminate. Unreadable
    directories are treated as empty.

    Args:
        directory: Directory to search, absolute or relative to ``base_dir``
        ext: Extension or extensions, with or without the leading dot
        base_dir: Directory results are made relative to (default: cwd)

    Returns:
        Sorted, deduplicated, POSIX-style paths relative to ``base_dir``
    """
    base = os.path.abspath(base_dir or os.getcwd())
    root = os.path.join(base, directory)
    return sorted(set(_walk(root, _normalize_exts(ext), base, set())))


async def get_file_paths_async(
    directory: str,
    ext: Union[str, Iterable[str]],
    base_dir: Optional[str] = None,
) -> List[str]:
    """Run get_file_paths off the event loop."""
    return await asyncio.to_thread(get_file_paths, directory, ext, base_dir)
