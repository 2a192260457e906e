"""
Default suppression.

Resolving resources into typed objects normally fills in defaults, and the
default provider is picked by platform-specific code. While suppression is
active, a set_default(attr)-shaped method decorated with skips_default()
leaves the suppressed attribute unset instead of calling through.
"""

import contextlib
import functools
import logging
from typing import Any, Callable, Iterator, Optional

logger = logging.getLogger(__name__)


class DefaultSuppression:
    """On/off switch for skipping one named default."""

    def __init__(self, attribute: str = "provider"):
        self.attribute = attribute
        self._suppressed = False

    def __repr__(self) -> str:
        return f"DefaultSuppression({self.attribute!r}, suppressed={self._suppressed})"

    @property
    def is_suppressed(self) -> bool:
        return self._suppressed

    def suppress(self) -> None:
        self._suppressed = True
        logger.debug("Suppressing default %r", self.attribute)

    def unsuppress(self) -> None:
        self._suppressed = False
        logger.debug("No longer suppressing default %r", self.attribute)

    def skips(self, attr: Any) -> bool:
        """Check if setting the default for attr should be skipped."""
        return self._suppressed and str(attr) == self.attribute

    @contextlib.contextmanager
    def suppressed(self) -> Iterator["DefaultSuppression"]:
        """Suppress for the body of a with-block, then restore the prior flag."""
        prior = self._suppressed
        self.suppress()
        try:
            yield self
        finally:
            self._suppressed = prior

    def skips_default(self, method: Callable[..., Any]) -> Callable[..., Any]:
        """Decorate a set_default(self, attr, ...) method."""
        @functools.wraps(method)
        def wrapper(obj: Any, attr: Any, *args: Any, **kwargs: Any) -> Any:
            if self.skips(attr):
                return None
            return method(obj, attr, *args, **kwargs)

        return wrapper


# Shared instance for the provider default
provider_suppression = DefaultSuppression("provider")


def skips_default(
    method: Optional[Callable[..., Any]] = None,
    *,
    suppression: Optional[DefaultSuppression] = None,
) -> Any:
    """Decorate a set_default method with provider_suppression or a given switch."""
    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        return (suppression or provider_suppression).skips_default(fn)

    if method is not None:
        return decorator(method)
    return decorator
