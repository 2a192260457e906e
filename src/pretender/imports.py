"""
Windows-only import guard.

Code that believes it is on Windows tends to import Windows-only modules,
which do not exist on other hosts. While the context pretends to be Windows
on a non-Windows host, the guard answers imports of the configured module
names with empty placeholder modules instead of failing.
"""

import importlib.abc
import importlib.util
import logging
import sys
from types import ModuleType
from typing import Iterable, List, Optional, Set

from pretender.platform import PlatformId
from pretender.platform.context import PlatformContext, get_context

logger = logging.getLogger(__name__)

PLACEHOLDER_ATTR = "__pretender_placeholder__"


def is_placeholder(module: ModuleType) -> bool:
    """Check if a module object was produced by the import guard."""
    return bool(getattr(module, PLACEHOLDER_ATTR, False))


class WindowsImportGuard(importlib.abc.MetaPathFinder, importlib.abc.Loader):
    """
    Meta path finder that substitutes placeholders for Windows-only modules.

    Args:
        context: Context to consult; the default context at construction
            time when omitted
        modules: Top-level module names to guard; submodules are covered too.
            Defaults to the configured guarded_modules.
    """

    def __init__(
        self,
        context: Optional[PlatformContext] = None,
        modules: Optional[Iterable[str]] = None,
    ):
        if modules is None:
            from pretender.config import get_config
            modules = get_config().guarded_modules
        self.context = context if context is not None else get_context()
        self.modules: Set[str] = set(modules)
        self._created: List[str] = []

    def guards(self, fullname: str) -> bool:
        return any(
            fullname == name or fullname.startswith(name + ".")
            for name in self.modules
        )

    def active(self) -> bool:
        """Check if imports would currently be substituted."""
        ctx = self.context
        return ctx.is_pretending_windows() and ctx.real_platform is not PlatformId.WINDOWS

    def find_spec(self, fullname, path, target=None):
        if not self.guards(fullname) or not self.active():
            return None
        return importlib.util.spec_from_loader(fullname, self, is_package=True)

    def create_module(self, spec):
        return None

    def exec_module(self, module: ModuleType) -> None:
        setattr(module, PLACEHOLDER_ATTR, True)
        self._created.append(module.__name__)
        logger.debug("Substituted placeholder for Windows-only module %s", module.__name__)

    @property
    def installed(self) -> bool:
        return self in sys.meta_path

    def install(self) -> None:
        """
        Put the guard at the front of sys.meta_path. Idempotent.

        Placeholders only stay in sys.modules while the guard is active;
        they are evicted as soon as the context stops pretending to be
        Windows or enters a without_pretending() scope.
        """
        if not self.installed:
            sys.meta_path.insert(0, self)
        self.context.add_listener(self._on_context_change)

    def uninstall(self) -> None:
        """Remove the guard and forget the placeholders it created."""
        self.context.remove_listener(self._on_context_change)
        if self.installed:
            sys.meta_path.remove(self)
        self._evict()

    def _on_context_change(self, context: PlatformContext) -> None:
        if not self.active():
            self._evict()

    def _evict(self) -> None:
        for name in self._created:
            module = sys.modules.get(name)
            if module is not None and is_placeholder(module):
                del sys.modules[name]
        self._created.clear()

    def __enter__(self) -> "WindowsImportGuard":
        self.install()
        return self

    def __exit__(self, *exc_info) -> None:
        self.uninstall()
