"""
Setup configuration for dnscontrolkit.

A SetupConfig is built once at the start of a run and passed explicitly to
every stage. Values are layered, later layers winning:

1. Built-in defaults
2. YAML configuration file (dnscontrolkit.yaml)
3. GitHub Actions inputs (INPUT_* environment variables)
4. Command-line flags

Example dnscontrolkit.yaml:

    version: latest
    resolve-strategy: redirect
    cache: true
    cache-dir: ~/.cache/dnscontrolkit
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from dnscontrolkit.core.exceptions import ConfigurationError
from dnscontrolkit.tool.resolver import STRATEGIES

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "dnscontrolkit.yaml"

# option name -> environment variables, first non-empty wins
INPUT_VARIABLES = {
    "version": ("INPUT_VERSION",),
    "auth_token": ("INPUT_AUTH-TOKEN", "INPUT_GITHUB-TOKEN"),
    "resolve_strategy": ("INPUT_RESOLVE-STRATEGY",),
    "cache_enabled": ("INPUT_CACHE",),
    "cache_dir": ("INPUT_CACHE-DIR",),
    "install_root": ("INPUT_INSTALL-ROOT",),
    "lock": ("INPUT_LOCK",),
}

# keys accepted in the YAML file besides the field names themselves
FILE_KEY_ALIASES = {
    "auth-token": "auth_token",
    "github-token": "auth_token",
    "resolve-strategy": "resolve_strategy",
    "cache": "cache_enabled",
    "cache-dir": "cache_dir",
    "install-root": "install_root",
    "http-timeout": "http_timeout",
}

TRUE_VALUES = ("true", "yes", "1", "on")
FALSE_VALUES = ("false", "no", "0", "off")


def default_cache_dir() -> Path:
    return Path.home() / ".dnscontrolkit" / "cache"


@dataclass
class SetupConfig:
    """Configuration of one setup run."""

    version: str
    auth_token: Optional[str] = field(default=None, repr=False)
    resolve_strategy: str = "auto"
    cache_enabled: bool = True
    cache_dir: Path = field(default_factory=default_cache_dir)
    install_root: Optional[Path] = None
    lock: bool = False
    http_timeout: float = 30

    def __post_init__(self):
        self.version = (self.version or "").strip()
        if not self.version:
            raise ConfigurationError("Input required and not supplied: version")

        if self.resolve_strategy not in STRATEGIES:
            raise ConfigurationError(
                f"Invalid resolve-strategy '{self.resolve_strategy}'. "
                f"Use one of: {', '.join(STRATEGIES)}"
            )

        if self.http_timeout <= 0:
            raise ConfigurationError(
                f"http-timeout must be positive, got {self.http_timeout}"
            )

        self.cache_dir = Path(self.cache_dir).expanduser()
        if self.install_root is not None:
            self.install_root = Path(self.install_root).expanduser()


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigurationError: If the file is required and missing, or is not valid YAML
    """
    if not config_file.exists():
        if required:
            raise ConfigurationError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration in {config_file} must be a mapping")

    return config


def _from_file(data: Mapping[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(SetupConfig)}
    values = {}
    for key, value in data.items():
        name = FILE_KEY_ALIASES.get(key, key)
        if name not in known:
            logger.warning(f"Ignoring unknown configuration key: {key}")
            continue
        values[name] = value
    return values


def _from_inputs(environ: Mapping[str, str]) -> Dict[str, Any]:
    values = {}
    for name, variables in INPUT_VARIABLES.items():
        for variable in variables:
            value = environ.get(variable, "").strip()
            if value:
                values[name] = value
                break
    return values


def parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: '{value}'")


def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
    for name in ("cache_enabled", "lock"):
        if name in values:
            values[name] = parse_bool(name, values[name])

    if "http_timeout" in values:
        try:
            values["http_timeout"] = float(values["http_timeout"])
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid http-timeout: '{values['http_timeout']}'"
            ) from e

    for name in ("version", "auth_token", "resolve_strategy"):
        if name in values and values[name] is not None:
            values[name] = str(values[name]).strip()

    for name in ("cache_dir", "install_root"):
        if values.get(name):
            values[name] = Path(str(values[name]))

    return values


def load_config(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> SetupConfig:
    """
    Build the setup configuration from all layers.

    Args:
        config_file: Explicit YAML file (required to exist); if None the
            optional ./dnscontrolkit.yaml is used
        environ: Environment to read INPUT_* variables from
        overrides: Values from the command line; None values are ignored

    Raises:
        ConfigurationError: If any layer holds an invalid value or version is missing
    """
    if config_file is not None:
        file_data = load_yaml_config(Path(config_file), required=True)
    else:
        file_data = load_yaml_config(Path.cwd() / DEFAULT_CONFIG_FILE)

    values: Dict[str, Any] = {}
    values.update(_from_file(file_data))
    values.update(_from_inputs(environ or {}))
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})

    values = _coerce(values)
    if "version" not in values:
        raise ConfigurationError("Input required and not supplied: version")

    return SetupConfig(**values)
