"""
Shared fixtures for pretender tests.

Contexts are built with an explicit real platform so the tests behave the
same on Windows and non-Windows hosts.
"""

import pytest

from pretender.config import PretenderConfig, get_config, set_config
from pretender.platform import PlatformId
from pretender.platform.context import PlatformContext, set_context


@pytest.fixture
def nix_host() -> PlatformContext:
    """A context whose real platform is non-Windows."""
    return PlatformContext(real_platform=PlatformId.NIX)


@pytest.fixture
def windows_host() -> PlatformContext:
    """A context whose real platform is Windows."""
    return PlatformContext(real_platform=PlatformId.WINDOWS)


@pytest.fixture
def default_context(nix_host: PlatformContext):
    """Install nix_host as the default context for the test."""
    previous = set_context(nix_host)
    yield nix_host
    set_context(previous)


@pytest.fixture
def fresh_config():
    """Install a default PretenderConfig for the test."""
    previous = get_config()
    config = PretenderConfig()
    set_config(config)
    yield config
    set_config(previous)
