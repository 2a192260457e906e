"""
Platform pretension context.

A PlatformContext records which platform the code under test should believe
it is running on. Predicates such as is_windows() consult it; code that has
to touch the real filesystem runs inside without_pretending(), which clears
the pretension for the duration of the call and restores it afterwards.

Usage:
    ctx = PlatformContext()
    ctx.pretend_to_be("windows")
    ctx.is_windows()                      # True
    ctx.without_pretending(os.path.isdir, "/etc")
    with ctx.without_pretending():
        ...                               # real platform here
"""

import contextlib
import logging
import threading
from typing import Any, Callable, Iterator, List, Optional, TypeVar

from pretender.platform import PlatformId, PlatformLike, detect_real_platform, parse_platform

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (path_separator, alt_separator) per platform
SEPARATORS = {
    PlatformId.WINDOWS: (";", "\\"),
    PlatformId.NIX: (":", None),
}


class PlatformContext:
    """
    Pretended and real platform state for one isolation scope.

    Args:
        real_platform: Override host detection (mostly useful in tests)
        synchronized: Guard reads, mutations and override scopes with a
            re-entrant lock so the context can be shared between threads.
            Other threads block while an override scope is open instead
            of seeing its suspended state.
    """

    def __init__(
        self,
        real_platform: Optional[PlatformLike] = None,
        synchronized: bool = False,
    ):
        self._real_platform = parse_platform(real_platform)
        self._pretend_platform: Optional[PlatformId] = None
        self._lock = threading.RLock() if synchronized else None
        self._listeners: List[Callable[["PlatformContext"], None]] = []

    def __repr__(self) -> str:
        return (
            f"PlatformContext(pretend={self._pretend_platform}, "
            f"real={self.real_platform})"
        )

    @property
    def synchronized(self) -> bool:
        return self._lock is not None

    @property
    def real_platform(self) -> PlatformId:
        """Host platform, detected once on first access."""
        if self._real_platform is None:
            self._real_platform = detect_real_platform()
        return self._real_platform

    @property
    def pretend_platform(self) -> Optional[PlatformId]:
        with self._locked():
            return self._pretend_platform

    @property
    def effective_platform(self) -> PlatformId:
        """The pretended platform if set, otherwise the real one."""
        with self._locked():
            if self._pretend_platform is None:
                return self.real_platform
            return self._pretend_platform

    def is_windows(self) -> bool:
        return self.effective_platform is PlatformId.WINDOWS

    def is_pretending_windows(self) -> bool:
        return self.pretend_platform is PlatformId.WINDOWS

    @property
    def path_separator(self) -> str:
        """Search-path separator of the effective platform."""
        return SEPARATORS[self.effective_platform][0]

    @property
    def alt_separator(self) -> Optional[str]:
        """Alternate directory separator of the effective platform, if any."""
        return SEPARATORS[self.effective_platform][1]

    def add_listener(self, callback: Callable[["PlatformContext"], None]) -> None:
        """Call callback(context) whenever the pretension changes, including override scopes."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Callable[["PlatformContext"], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self)

    def pretend_to_be(self, platform: PlatformLike) -> None:
        """
        Pretend to be running on the given platform.

        Passing None clears the pretension. The derived separators follow
        the new effective platform immediately.

        Raises:
            UnknownPlatformError: If a platform name cannot be parsed
        """
        platform_id = parse_platform(platform)
        with self._locked():
            self._pretend_platform = platform_id
            self._notify()
        if platform_id is None:
            logger.debug("Cleared platform pretension (real platform: %s)", self.real_platform)
        else:
            logger.debug("Pretending to be %s", platform_id)

    def reset(self) -> None:
        """Forget any pretension."""
        self.pretend_to_be(None)

    @contextlib.contextmanager
    def pretending(self, platform: PlatformLike) -> Iterator["PlatformContext"]:
        """Pretend to be a platform for the body of a with-block."""
        with self._locked():
            prior = self._pretend_platform
            self.pretend_to_be(platform)
            try:
                yield self
            finally:
                self.pretend_to_be(prior)

    def without_pretending(
        self,
        operation: Optional[Callable[..., T]] = None,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """
        Run an operation as though no pretension were active.

        With an operation, calls it with the given arguments and returns its
        result. Without one, returns a context manager with the same
        behavior. The prior pretension is restored on return and when the
        operation raises; the exception propagates unchanged.
        """
        if operation is None:
            return self._real_platform_scope()
        with self._real_platform_scope():
            return operation(*args, **kwargs)

    @contextlib.contextmanager
    def _real_platform_scope(self) -> Iterator["PlatformContext"]:
        with self._locked():
            prior = self._pretend_platform
            if prior is not None:
                logger.debug("Suspending pretension (%s) for real-platform call", prior)
                self._pretend_platform = None
                self._notify()
            try:
                yield self
            finally:
                self._pretend_platform = prior
                if prior is not None:
                    logger.debug("Restored pretension (%s)", prior)
                    self._notify()

    @contextlib.contextmanager
    def _locked(self) -> Iterator[None]:
        if self._lock is None:
            yield
            return
        with self._lock:
            yield


# Default context for call sites that are not handed one explicitly
_context: Optional[PlatformContext] = None


def get_context() -> PlatformContext:
    """Get the process-wide default context, creating it on first use."""
    global _context
    if _context is None:
        _context = PlatformContext()
    return _context


def set_context(context: Optional[PlatformContext]) -> Optional[PlatformContext]:
    """
    Replace the default context.

    None drops it so the next access rebuilds it.

    Returns:
        The previous default context, or None if none was created yet
    """
    global _context
    previous, _context = _context, context
    return previous


def reset_context() -> None:
    """Clear any pretension on the default context."""
    if _context is not None:
        _context.reset()
