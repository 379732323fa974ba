"""
Module Loader
Discovers Python files in a directory and imports them concurrently
"""

import asyncio
import importlib
import logging
from types import ModuleType
from typing import List, Optional, Tuple

from utils.files import get_file_paths_async

LoadedModule = Tuple[str, ModuleType]


def module_name_for(path: str) -> str:
    """
    Convert a base-relative POSIX file path to a dotted module name.

    Args:
        path: Path such as ``commands/ping.py``

    Returns:
        Module name such as ``commands.ping``
    """
    if path.endswith(".py"):
        path = path[:-3]
    return path.replace("/", ".")


def _is_private(path: str) -> bool:
    return path.rsplit("/", 1)[-1].startswith("_")


async def _import(path: str, logger: logging.Logger, label: str) -> Optional[ModuleType]:
    try:
        return await asyncio.to_thread(importlib.import_module, module_name_for(path))
    except Exception:
        logger.exception(f"Failed to load {label} from {path}")
        return None


async def load_modules(
    directory: str,
    base_dir: str,
    logger: logging.Logger,
    label: str,
) -> List[LoadedModule]:
    """
    Import every public ``.py`` file under a directory.

    A file that fails to import is logged and skipped without affecting
    its siblings. Files whose name starts with ``_`` are not imported.

    Args:
        directory: Directory to scan, relative to ``base_dir``
        base_dir: Import root (must be on ``sys.path``)
        logger: Logger for import failures
        label: Kind of definition, used in log messages

    Returns:
        (path, module) pairs in lexicographic path order
    """
    importlib.invalidate_caches()
    paths = [p for p in await get_file_paths_async(directory, ".py", base_dir) if not _is_private(p)]
    modules = await asyncio.gather(*(_import(path, logger, label) for path in paths))
    return [(path, module) for path, module in zip(paths, modules) if module is not None]
