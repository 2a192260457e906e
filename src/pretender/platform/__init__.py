"""
Platform identification for pretension.

Detects the real host platform once at import time and defines the
platform identifiers a test can pretend to be.
"""

import enum
import platform as _platform
from typing import Optional, Union

from pretender.errors import UnknownPlatformError

# Detect current platform
IS_WINDOWS = _platform.system() == "Windows"


class PlatformId(enum.Enum):
    """Platforms a context can pretend to be."""

    WINDOWS = "windows"
    NIX = "nix"

    def __str__(self) -> str:
        return self.value


# Aliases accepted by parse_platform
PLATFORM_ALIASES = {
    "windows": PlatformId.WINDOWS,
    "win": PlatformId.WINDOWS,
    "win32": PlatformId.WINDOWS,
    "nt": PlatformId.WINDOWS,
    "nix": PlatformId.NIX,
    "posix": PlatformId.NIX,
    "unix": PlatformId.NIX,
    "linux": PlatformId.NIX,
    "darwin": PlatformId.NIX,
    "macos": PlatformId.NIX,
}

PlatformLike = Union[PlatformId, str, None]


def parse_platform(value: PlatformLike) -> Optional[PlatformId]:
    """
    Convert a platform name to a PlatformId.

    Args:
        value: A PlatformId, None, or a case-insensitive name such as
            "windows" or "linux". An empty string or "none" means no platform.

    Returns:
        The matching PlatformId, or None

    Raises:
        UnknownPlatformError: If the name is not recognised
    """
    if value is None or isinstance(value, PlatformId):
        return value

    name = str(value).strip().lower()
    if name in ("", "none"):
        return None
    try:
        return PLATFORM_ALIASES[name]
    except KeyError:
        raise UnknownPlatformError(str(value), sorted(PLATFORM_ALIASES)) from None


def detect_real_platform() -> PlatformId:
    """Return the platform of the running host."""
    return PlatformId.WINDOWS if IS_WINDOWS else PlatformId.NIX
