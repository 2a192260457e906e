"""
Pretender Integration Hooks

Extension points for making third-party call sites honour the pretension
correctly. Call sites that only ask "am I on Windows" consult the context;
call sites that do real filesystem or path work are wrapped so they run on
the real platform.

Usage:
    @runs_on_real_platform
    def load_manifest(path): ...

    hooks = HookSet()
    hooks.real_platform(TypeLoader, "try_load_fqname")
    hooks.real_platform(Environment, "validate_dirs", required=False)
    with hooks:
        ...
"""

import functools
import inspect
import logging
from typing import Any, Callable, List, Optional

from pretender.errors import HookError
from pretender.platform.context import PlatformContext, get_context

logger = logging.getLogger(__name__)

Wrapper = Callable[[Callable[..., Any]], Callable[..., Any]]

_MISSING = object()


def runs_on_real_platform(
    func: Optional[Callable[..., Any]] = None,
    *,
    context: Optional[PlatformContext] = None,
) -> Any:
    """
    Decorator that runs a function with the pretension suspended.

    Usable bare or with a context argument. Without a context, the default
    context is looked up on every call so that replacing it later is honoured.
    """
    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            ctx = context if context is not None else get_context()
            return ctx.without_pretending(fn, *args, **kwargs)

        wrapper.__pretender_real_platform__ = True
        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


class Patch:
    """
    A reversible replacement of one attribute on a class or module.

    On apply() the attribute is replaced by wrapper(original); undo() puts
    the original back, or removes the override when the attribute was
    inherited. staticmethod and classmethod descriptors are unwrapped and
    rewrapped so the patched attribute binds the same way.
    """

    def __init__(
        self,
        owner: Any,
        name: str,
        wrapper: Wrapper,
        required: bool = True,
    ):
        self.owner = owner
        self.name = name
        self.wrapper = wrapper
        self.required = required
        self._saved: Any = _MISSING
        self._applied = False

    def __repr__(self) -> str:
        state = "applied" if self._applied else "pending"
        return f"<Patch {getattr(self.owner, '__name__', self.owner)}.{self.name} {state}>"

    @property
    def applied(self) -> bool:
        return self._applied

    def apply(self) -> bool:
        """
        Install the wrapper.

        Returns:
            True if installed, False if an optional target was missing

        Raises:
            HookError: If a required target is missing or already patched
        """
        if self._applied:
            raise HookError(self.owner, self.name, "patch already applied")

        try:
            raw = inspect.getattr_static(self.owner, self.name)
        except AttributeError:
            if self.required:
                raise HookError(self.owner, self.name, "attribute does not exist") from None
            logger.warning(
                "Skipping optional patch %s.%s: attribute does not exist",
                getattr(self.owner, "__name__", self.owner), self.name,
            )
            return False

        own = vars(self.owner) if hasattr(self.owner, "__dict__") else {}
        self._saved = own.get(self.name, _MISSING)

        if isinstance(raw, (staticmethod, classmethod)):
            replacement = type(raw)(self.wrapper(raw.__func__))
        elif callable(raw):
            replacement = self.wrapper(raw)
        else:
            raise HookError(self.owner, self.name, f"{type(raw).__name__} is not callable")

        setattr(self.owner, self.name, replacement)
        self._applied = True
        logger.debug("Patched %s.%s", getattr(self.owner, "__name__", self.owner), self.name)
        return True

    def undo(self) -> None:
        """Restore the original attribute. A no-op if not applied."""
        if not self._applied:
            return
        if self._saved is _MISSING:
            delattr(self.owner, self.name)
        else:
            setattr(self.owner, self.name, self._saved)
        self._saved = _MISSING
        self._applied = False
        logger.debug("Restored %s.%s", getattr(self.owner, "__name__", self.owner), self.name)

    def __enter__(self) -> "Patch":
        self.apply()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.undo()


class HookSet:
    """
    An ordered group of patches applied and undone together.

    Patches are undone in reverse order. If applying one fails, the ones
    already applied are undone before the error propagates.
    """

    def __init__(self, context: Optional[PlatformContext] = None):
        self.context = context
        self.patches: List[Patch] = []

    def __len__(self) -> int:
        return len(self.patches)

    def add(self, patch: Patch) -> Patch:
        self.patches.append(patch)
        return patch

    def wrap(self, owner: Any, name: str, wrapper: Wrapper, required: bool = True) -> Patch:
        """Add a patch with an arbitrary wrapper."""
        return self.add(Patch(owner, name, wrapper, required=required))

    def real_platform(self, owner: Any, name: str, required: bool = True) -> Patch:
        """Add a patch that runs owner.name on the real platform."""
        context = self.context
        return self.wrap(
            owner,
            name,
            lambda original: runs_on_real_platform(original, context=context),
            required=required,
        )

    def apply(self) -> None:
        applied = []
        try:
            for patch in self.patches:
                if patch.apply():
                    applied.append(patch)
        except Exception:
            for patch in reversed(applied):
                patch.undo()
            raise

    def undo(self) -> None:
        for patch in reversed(self.patches):
            patch.undo()

    def __enter__(self) -> "HookSet":
        self.apply()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.undo()
