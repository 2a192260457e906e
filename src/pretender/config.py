"""
Pretender Configuration

Settings shared by the pytest plugin, the import guard and the default
context. Values come from code (configure()), a YAML file (load_config())
or the environment (config_from_env()).
"""

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Set, Union

import yaml

from pretender.errors import ConfigError, UnknownPlatformError
from pretender.platform import parse_platform


DEFAULT_GUARDED_MODULES = frozenset({
    "winreg",
    "msvcrt",
    "_winapi",
    "win32api",
    "win32con",
    "pywintypes",
    "wmi",
})

ENV_PLATFORM = "PRETENDER_PLATFORM"
ENV_SUPPRESS_PROVIDER = "PRETENDER_SUPPRESS_PROVIDER"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class PretenderConfig:
    """
    Configuration for platform pretension in a test run.

    Attributes:
        platform: Platform every test pretends to be unless it says otherwise
        guarded_modules: Modules the import guard replaces with placeholders
        suppress_provider: Suppress the provider default for every test
        synchronized: Build contexts that can be shared between threads
    """

    platform: Optional[str] = None
    guarded_modules: Set[str] = field(default_factory=lambda: set(DEFAULT_GUARDED_MODULES))
    suppress_provider: bool = False
    synchronized: bool = False

    def validate(self, file_path: Optional[str] = None) -> None:
        """
        Check values that cannot be expressed in the field types.

        Raises:
            ConfigError: If the platform name is unknown
        """
        try:
            parse_platform(self.platform)
        except UnknownPlatformError as e:
            raise ConfigError(e.message, file_path=file_path, details=e.details) from None


# Default configuration
_config = PretenderConfig()


def get_config() -> PretenderConfig:
    """Get the current configuration."""
    return _config


def set_config(config: PretenderConfig) -> None:
    """Set the configuration."""
    global _config
    _config = config


def configure(**kwargs) -> None:
    """
    Configure settings in place. Unknown keys are ignored.

    Raises:
        ConfigError: If the new values do not validate; nothing is changed
    """
    known = {key: value for key, value in kwargs.items() if hasattr(_config, key)}
    replace(_config, **known).validate()
    for key, value in known.items():
        setattr(_config, key, value)


def _parse_bool(name: str, value: Any, file_path: Optional[str] = None) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}", file_path=file_path)


def config_from_mapping(
    data: Mapping[str, Any],
    file_path: Optional[str] = None,
) -> PretenderConfig:
    """
    Build a config from a mapping such as a parsed YAML document.

    Raises:
        ConfigError: If a key is unknown or a value has the wrong shape
    """
    known = {f.name for f in fields(PretenderConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(
            f"Unknown setting(s): {', '.join(unknown)}",
            file_path=file_path,
            details=f"valid settings: {', '.join(sorted(known))}",
        )

    values: Dict[str, Any] = {}
    if "platform" in data:
        platform = data["platform"]
        values["platform"] = None if platform is None else str(platform)
    if "guarded_modules" in data:
        modules = data["guarded_modules"] or []
        if isinstance(modules, str) or not isinstance(modules, (list, tuple, set)):
            raise ConfigError("guarded_modules must be a list of module names", file_path=file_path)
        values["guarded_modules"] = {str(m) for m in modules}
    for flag in ("suppress_provider", "synchronized"):
        if flag in data:
            values[flag] = _parse_bool(flag, data[flag], file_path)

    config = PretenderConfig(**values)
    config.validate(file_path)
    return config


def load_config(path: Union[str, Path]) -> PretenderConfig:
    """
    Load configuration from a YAML file.

    Raises:
        ConfigError: If the file is missing, not valid YAML, or not a mapping
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError("File not found", file_path=str(config_path))

    content = config_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML syntax error: {e}", file_path=str(config_path))

    if data is None:
        return PretenderConfig()
    if not isinstance(data, dict):
        raise ConfigError(
            f"Expected a mapping, got {type(data).__name__}",
            file_path=str(config_path),
        )
    return config_from_mapping(data, file_path=str(config_path))


def config_from_env(
    config: Optional[PretenderConfig] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> PretenderConfig:
    """Return a copy of config with environment overrides applied."""
    env = os.environ if environ is None else environ
    base = config if config is not None else get_config()
    changes: Dict[str, Any] = {"guarded_modules": set(base.guarded_modules)}

    if ENV_PLATFORM in env:
        changes["platform"] = env[ENV_PLATFORM] or None
    if ENV_SUPPRESS_PROVIDER in env:
        changes["suppress_provider"] = _parse_bool(ENV_SUPPRESS_PROVIDER, env[ENV_SUPPRESS_PROVIDER])

    result = replace(base, **changes)
    result.validate()
    return result
