# Copyright (c) 2024 Pretender Contributors
# MIT License

"""
Pretender: platform pretension for tests.

Lets tests run code as though it were on another operating system (usually
Windows) while actually executing on the host.

Features:
    - PlatformContext with pretend_to_be(), is_windows() and derived separators
    - without_pretending() scopes that always restore the prior pretension
    - Decorators and reversible patches for wrapping real-I/O call sites
    - Provider default suppression and a Windows-only import guard
    - pytest plugin with fixtures, a marker and command-line options

This package exposes the public API and release metadata.
"""

from __future__ import annotations

from pretender.release import __version__, __author__, __codename__
from pretender.platform import PlatformId, parse_platform
from pretender.platform.context import PlatformContext, get_context, set_context, reset_context
from pretender.hooks import HookSet, Patch, runs_on_real_platform
from pretender.suppress import DefaultSuppression, provider_suppression
from pretender.imports import WindowsImportGuard

__all__ = [
    "__version__",
    "__author__",
    "__codename__",
    "PlatformId",
    "parse_platform",
    "PlatformContext",
    "get_context",
    "set_context",
    "reset_context",
    "HookSet",
    "Patch",
    "runs_on_real_platform",
    "DefaultSuppression",
    "provider_suppression",
    "WindowsImportGuard",
]
