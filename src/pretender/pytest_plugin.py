"""
pytest plugin for platform pretension.

Registered through the ``pytest11`` entry point. Provides:

    --pretend-platform NAME     pretend every test runs on NAME
    --pretender-config PATH     YAML configuration file
    pretend_platform / pretender_config ini keys with the same meaning

    @pytest.mark.pretend_platform("windows")

    platform_context, pretend_windows, pretend_nix and import_guard fixtures

The platform a test pretends to be is taken from its marker, then the
command line, then the ini file, then the configuration. The default
context's pretension is cleared after every test.
"""

import logging
from pathlib import Path
from typing import Iterator, Optional

import pytest

from pretender.config import config_from_env, get_config, load_config, set_config
from pretender.errors import PretenderError
from pretender.imports import WindowsImportGuard
from pretender.platform import PlatformId, parse_platform
from pretender.platform.context import PlatformContext, reset_context, set_context
from pretender.suppress import provider_suppression

logger = logging.getLogger(__name__)

MARKER = "pretend_platform"

_prior_config_key = pytest.StashKey[object]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("pretender", "platform pretension")
    group.addoption(
        "--pretend-platform",
        action="store",
        dest="pretend_platform",
        default=None,
        metavar="NAME",
        help="Pretend every test runs on this platform (windows, nix, ...)",
    )
    group.addoption(
        "--pretender-config",
        action="store",
        dest="pretender_config",
        default=None,
        metavar="PATH",
        help="YAML file with pretender settings",
    )
    parser.addini("pretend_platform", "Platform every test pretends to be", default=None)
    parser.addini("pretender_config", "YAML file with pretender settings", default=None)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        f"{MARKER}(name): run the test pretending to be the named platform",
    )

    config.stash[_prior_config_key] = get_config()

    config_path = config.getoption("pretender_config")
    if not config_path:
        ini_path = config.getini("pretender_config")
        if ini_path:
            config_path = str(Path(config.rootpath) / ini_path)

    try:
        base = load_config(config_path) if config_path else get_config()
        set_config(config_from_env(base))
        parse_platform(config.getoption("pretend_platform"))
        parse_platform(config.getini("pretend_platform"))
    except PretenderError as e:
        raise pytest.UsageError(str(e)) from None


def pytest_unconfigure(config: pytest.Config) -> None:
    prior = config.stash.get(_prior_config_key, None)
    if prior is not None:
        set_config(prior)


def _requested_platform(request: pytest.FixtureRequest) -> Optional[PlatformId]:
    marker = request.node.get_closest_marker(MARKER)
    if marker is not None:
        name = marker.args[0] if marker.args else marker.kwargs.get("platform")
        if name is None:
            raise pytest.UsageError(
                f"{request.node.nodeid}: {MARKER} marker needs a platform name"
            )
        return parse_platform(name)

    for value in (
        request.config.getoption("pretend_platform"),
        request.config.getini("pretend_platform"),
        get_config().platform,
    ):
        if value:
            return parse_platform(value)
    return None


@pytest.fixture
def platform_context(request: pytest.FixtureRequest) -> Iterator[PlatformContext]:
    """
    A fresh PlatformContext installed as the default for one test.

    The context starts out pretending to be the requested platform, if any.
    The previous default context is put back afterwards.
    """
    settings = get_config()
    ctx = PlatformContext(synchronized=settings.synchronized)
    platform = _requested_platform(request)
    if platform is not None:
        logger.debug("%s pretends to be %s", request.node.nodeid, platform)
    ctx.pretend_to_be(platform)
    previous = set_context(ctx)
    try:
        if settings.suppress_provider:
            with provider_suppression.suppressed():
                yield ctx
        else:
            yield ctx
    finally:
        ctx.reset()
        set_context(previous)


@pytest.fixture
def pretend_windows(platform_context: PlatformContext) -> PlatformContext:
    """The test context, pretending to be Windows."""
    platform_context.pretend_to_be(PlatformId.WINDOWS)
    return platform_context


@pytest.fixture
def pretend_nix(platform_context: PlatformContext) -> PlatformContext:
    """The test context, pretending to be a non-Windows platform."""
    platform_context.pretend_to_be(PlatformId.NIX)
    return platform_context


@pytest.fixture
def import_guard(platform_context: PlatformContext) -> Iterator[WindowsImportGuard]:
    """An installed WindowsImportGuard bound to the test context."""
    guard = WindowsImportGuard(platform_context, get_config().guarded_modules)
    with guard:
        yield guard


@pytest.fixture(autouse=True)
def _pretender_isolation(request: pytest.FixtureRequest) -> Iterator[None]:
    if _requested_platform(request) is not None or get_config().suppress_provider:
        request.getfixturevalue("platform_context")
    yield
    reset_context()
