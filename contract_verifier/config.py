"""
Network registry and verifier settings

The registry is read from ``chains.yaml`` (shipped with the package, or a file
passed by the caller) once at startup. API keys come from the environment
variable each chain names; a chain without a key is still listed but every
request against it fails with ``MissingCredential``.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import yaml

from .errors import ConfigError, MissingCredential, UnsupportedNetwork

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path(__file__).parent / "chains.yaml"

DEFAULT_SUBMIT_TIMEOUT = 30.0
DEFAULT_STATUS_TIMEOUT = 10.0
DEFAULT_MAX_ATTEMPTS = 12
DEFAULT_POLL_INTERVAL = 5.0

# environment variable -> (settings key, parser)
ENV_OVERRIDES = {
    "VERIFIER_SUBMIT_TIMEOUT": ("submit_timeout", float),
    "VERIFIER_STATUS_TIMEOUT": ("status_timeout", float),
    "VERIFIER_MAX_ATTEMPTS": ("max_attempts", int),
    "VERIFIER_POLL_INTERVAL": ("poll_interval", float),
}


@dataclass(frozen=True)
class NetworkConfig:
    name: str
    api_url: str
    explorer_url: str
    credential: str = field(default="", repr=False)
    key_env: str = ""

    @property
    def has_credential(self) -> bool:
        return bool(self.credential)


class NetworkRegistry(Mapping):
    """Read-only mapping of network identifier to NetworkConfig"""

    def __init__(self, networks: Dict[str, NetworkConfig]):
        self._networks = dict(networks)

    def __getitem__(self, network: str) -> NetworkConfig:
        return self._networks[network]

    def __iter__(self) -> Iterator[str]:
        return iter(self._networks)

    def __len__(self) -> int:
        return len(self._networks)

    def names(self) -> List[str]:
        return list(self._networks)

    def lookup(self, network: str) -> NetworkConfig:
        if network not in self._networks:
            raise UnsupportedNetwork(
                f"Unsupported network: {network}. Supported networks: {', '.join(self.names())}"
            )
        return self._networks[network]

    def require_credential(self, network: str) -> NetworkConfig:
        config = self.lookup(network)
        if not config.has_credential:
            env_name = config.key_env or f"{network.upper()}_API_KEY"
            raise MissingCredential(
                f"API key not found for {config.name}. Please set {env_name} in your .env file"
            )
        return config


@dataclass(frozen=True)
class VerifierConfig:
    networks: NetworkRegistry
    submit_timeout: float = DEFAULT_SUBMIT_TIMEOUT
    status_timeout: float = DEFAULT_STATUS_TIMEOUT
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    poll_interval: float = DEFAULT_POLL_INTERVAL


def _read_yaml(config_file: Path) -> dict:
    if not config_file.exists():
        raise ConfigError(f"Config file not found: {config_file}")

    with open(config_file, "r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid config file {config_file}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("chains"), dict):
        raise ConfigError(f"Config file {config_file} has no 'chains' section")
    return data


def _build_network(network: str, entry: dict, environ: Mapping) -> NetworkConfig:
    if not isinstance(entry, dict):
        raise ConfigError(f"Chain entry '{network}' must be a mapping")
    try:
        api_url = entry["explorer_api_url"]
        explorer_url = entry["explorer_url"]
    except KeyError as e:
        raise ConfigError(f"Chain '{network}' is missing {e.args[0]}") from e

    key_env = entry.get("explorer_api_key_env") or f"{network.upper()}_API_KEY"
    credential = (environ.get(key_env) or "").strip()
    if not credential:
        logger.debug("No API key in %s for %s", key_env, network)

    return NetworkConfig(
        name=str(entry.get("name") or network),
        api_url=str(api_url),
        explorer_url=str(explorer_url).rstrip("/"),
        credential=credential,
        key_env=key_env,
    )


def _settings(defaults: dict, environ: Mapping) -> dict:
    settings = {
        "submit_timeout": DEFAULT_SUBMIT_TIMEOUT,
        "status_timeout": DEFAULT_STATUS_TIMEOUT,
        "max_attempts": DEFAULT_MAX_ATTEMPTS,
        "poll_interval": DEFAULT_POLL_INTERVAL,
    }
    parsers = {key: parser for key, parser in ENV_OVERRIDES.values()}

    for key, value in (defaults or {}).items():
        if key not in settings:
            logger.warning("Ignoring unknown setting in config defaults: %s", key)
            continue
        try:
            settings[key] = parsers[key](value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid value for {key}: {value!r}") from e

    for env_name, (key, parser) in ENV_OVERRIDES.items():
        raw = environ.get(env_name)
        if raw is None or raw == "":
            continue
        try:
            settings[key] = parser(raw)
        except ValueError as e:
            raise ConfigError(f"Invalid value for {env_name}: {raw!r}") from e

    if settings["max_attempts"] < 1:
        raise ConfigError("max_attempts must be at least 1")
    for key in ("submit_timeout", "status_timeout"):
        if settings[key] <= 0:
            raise ConfigError(f"{key} must be positive")
    if settings["poll_interval"] < 0:
        raise ConfigError("poll_interval cannot be negative")
    return settings


def load_config(
    config_file: Optional[Path] = None, environ: Optional[Mapping] = None
) -> VerifierConfig:
    """Build the verifier configuration from a chains YAML file and the environment"""
    config_file = Path(config_file) if config_file else DEFAULT_CONFIG_FILE
    environ = os.environ if environ is None else environ

    data = _read_yaml(config_file)
    networks = {
        str(network): _build_network(str(network), entry, environ)
        for network, entry in data["chains"].items()
    }
    settings = _settings(data.get("defaults") or {}, environ)

    logger.debug("Loaded %d networks from %s", len(networks), config_file)
    return VerifierConfig(networks=NetworkRegistry(networks), **settings)
