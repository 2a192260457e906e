"""
Platform-aware path handling.

Two kinds of helpers live here. The first only answers questions about
paths (separators, absoluteness, search-path splitting) and follows the
effective platform, so pretending to be Windows makes them answer the Windows
way. The second touches the real filesystem and always runs on the real
platform, whatever the surrounding test pretends.
"""

import ntpath
import os
import posixpath
import re
from typing import Iterable, List, Optional, Tuple, Union

from pretender.hooks import runs_on_real_platform
from pretender.platform.context import PlatformContext, get_context


PathLike = Union[str, os.PathLike]

# Drive-letter (C:\ or C:/), UNC (\\server\share or //server/share) and
# device (\\?\ or \\.\) paths
_WINDOWS_ABSOLUTE = re.compile(
    r"^(?:[A-Za-z]:[\\/]|[\\/]{2}[^\\/]+[\\/][^\\/]+|\\\\[?.]\\)"
)


def _resolve(context: Optional[PlatformContext]) -> PlatformContext:
    return context if context is not None else get_context()


def path_separator(context: Optional[PlatformContext] = None) -> str:
    """Search-path separator (";" or ":") for the effective platform."""
    return _resolve(context).path_separator


def alt_separator(context: Optional[PlatformContext] = None) -> Optional[str]:
    """Alternate directory separator ("\\" or None) for the effective platform."""
    return _resolve(context).alt_separator


def separators(context: Optional[PlatformContext] = None) -> Tuple[str, Optional[str]]:
    """Return (path_separator, alt_separator) from a single read of the context."""
    ctx = _resolve(context)
    return ctx.path_separator, ctx.alt_separator


def is_absolute(path: PathLike, context: Optional[PlatformContext] = None) -> bool:
    """
    Check if a path is absolute on the effective platform.

    Windows accepts drive-letter, UNC and device paths; everything else
    requires a leading slash.
    """
    path_str = os.fspath(path)
    if _resolve(context).is_windows():
        return bool(_WINDOWS_ABSOLUTE.match(path_str))
    return path_str.startswith("/")


def split_search_path(value: str, context: Optional[PlatformContext] = None) -> List[str]:
    """Split a PATH-style string on the effective separator, dropping empties."""
    if not value:
        return []
    return [part for part in value.split(path_separator(context)) if part]


def join_search_path(parts: Iterable[PathLike], context: Optional[PlatformContext] = None) -> str:
    """Join entries into a PATH-style string with the effective separator."""
    return path_separator(context).join(os.fspath(p) for p in parts)


def to_native(path: PathLike, context: Optional[PlatformContext] = None) -> str:
    """Convert a path to the directory separator of the effective platform."""
    if _resolve(context).is_windows():
        return os.fspath(path).replace("/", "\\")
    return os.fspath(path).replace("\\", "/")


def join(*parts: PathLike, context: Optional[PlatformContext] = None) -> str:
    """Join path components the way the effective platform would."""
    module = ntpath if _resolve(context).is_windows() else posixpath
    return module.join(*[os.fspath(p) for p in parts])


@runs_on_real_platform
def exists(path: PathLike) -> bool:
    """Check if a path exists."""
    return os.path.exists(path)


@runs_on_real_platform
def is_file(path: PathLike) -> bool:
    """Check if path is a file."""
    return os.path.isfile(path)


@runs_on_real_platform
def is_dir(path: PathLike) -> bool:
    """Check if path is a directory."""
    return os.path.isdir(path)


@runs_on_real_platform
def abspath(path: PathLike) -> str:
    """Get absolute path."""
    return os.path.abspath(path)


@runs_on_real_platform
def realpath(path: PathLike) -> str:
    """Get real path, resolving symlinks."""
    return os.path.realpath(path)


def validate_dirs(
    dirs: Iterable[PathLike],
    context: Optional[PlatformContext] = None,
) -> List[str]:
    """
    Keep the directories that are usable on the real host.

    A directory is kept when it is absolute for the real platform and exists.
    Order is preserved and duplicates are dropped. Runs inside the context's
    real-platform scope, so a test pretending to be Windows on a Linux host
    still validates Linux paths.
    """
    ctx = _resolve(context)

    def _validate() -> List[str]:
        seen = set()
        valid = []
        for entry in dirs:
            path_str = os.fspath(entry)
            if path_str in seen:
                continue
            seen.add(path_str)
            if is_absolute(path_str, ctx) and os.path.isdir(path_str):
                valid.append(path_str)
        return valid

    return ctx.without_pretending(_validate)
