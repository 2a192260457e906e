# Copyright (c) 2024 Pretender Contributors
# MIT License

"""
Pretender Error Classes.

All custom exceptions raised by the library. The scoped override never wraps
errors raised by the operation it runs; those propagate unchanged.
"""

from __future__ import annotations

from typing import Iterable


class PretenderError(Exception):
    """Base exception for all Pretender errors."""

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\n  Details: {self.details}"
        return self.message


class UnknownPlatformError(PretenderError):
    """A platform name that does not map to a known platform."""

    def __init__(self, value: str, accepted: Iterable[str] | None = None) -> None:
        self.value = value
        details = None
        if accepted:
            details = "accepted names: " + ", ".join(accepted)
        super().__init__(f"Unknown platform: {value!r}", details)


class HookError(PretenderError):
    """Error installing or removing a call-site patch."""

    def __init__(self, owner: object, name: str, message: str) -> None:
        self.owner = owner
        self.name = name
        owner_name = getattr(owner, "__qualname__", None) or getattr(
            owner, "__name__", type(owner).__name__
        )
        super().__init__(f"Cannot patch {owner_name}.{name}: {message}")


class ConfigError(PretenderError):
    """Error loading or validating configuration."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        details: str | None = None,
    ) -> None:
        self.file_path = file_path
        location = f" in {file_path}" if file_path else ""
        super().__init__(f"Configuration error{location}: {message}", details)
