"""TOML-based console configuration.

Loads ~/.skydeck/defaults.toml (global) and skydeck.toml (project), merges
them, and resolves the result into a frozen ``Settings``. The
``SKYDECK_API_URL`` and ``SKYDECK_API_TOKEN`` environment variables win over
both files.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from skydeck.conversation.executor import DEFAULT_MANAGEMENT_PATH, DEFAULT_REDIRECT_DELAY
from skydeck.core.exceptions import ConfigurationError
from skydeck.observability.logging import LogConfig
from skydeck.providers.aws.config import AWS
from skydeck.providers.gcp.config import GCP
from skydeck.providers.proxmox.config import Proxmox

type RawConfig = dict[str, Any]

GLOBAL_CONFIG_PATH = Path.home() / ".skydeck" / "defaults.toml"
PROJECT_CONFIG_NAME = "skydeck.toml"

DEFAULT_API_URL = "http://localhost:8000/api"
DEFAULT_PREFERENCES_PATH = Path.home() / ".skydeck" / "preferences.json"

ENV_API_URL = "SKYDECK_API_URL"
ENV_API_TOKEN = "SKYDECK_API_TOKEN"


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> RawConfig:
    global_cfg = _read_toml(global_path or GLOBAL_CONFIG_PATH)
    project_path = (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME
    project_cfg = _read_toml(project_path)

    merged = _deep_merge(global_cfg, project_cfg)
    for section in ("api", "providers", "console", "logging"):
        merged.setdefault(section, {})
    return merged


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved console settings.

    Args:
        api_url: Base URL of the console backend, including the ``/api`` prefix.
        token: Bearer token sent with every request. No auth header if None.
        timeout: Total per-request timeout in seconds. None disables it.
        providers: Provider configurations, keyed by provider name.
        management_path: Where the console navigates after a cluster is created.
        redirect_delay: Seconds between the success message and that navigation.
        preferences_path: JSON file backing the preference store.
        logging: Logging sinks for the console.
    """

    api_url: str = DEFAULT_API_URL
    token: str | None = None
    timeout: float | None = None
    providers: Mapping[str, Proxmox | GCP | AWS] = field(
        default_factory=lambda: {"gcp": GCP(), "aws": AWS()},
    )
    management_path: str = DEFAULT_MANAGEMENT_PATH
    redirect_delay: float = DEFAULT_REDIRECT_DELAY
    preferences_path: Path = DEFAULT_PREFERENCES_PATH
    logging: LogConfig = field(default_factory=LogConfig)


_PROVIDER_TYPES: dict[str, type[Proxmox | GCP | AWS]] = {
    "proxmox": Proxmox,
    "gcp": GCP,
    "aws": AWS,
}


def _build_provider(name: str, raw: Any) -> Proxmox | GCP | AWS:
    cls = _PROVIDER_TYPES.get(name)
    if cls is None:
        raise ConfigurationError(
            f"Unknown provider '{name}'. Valid: {', '.join(_PROVIDER_TYPES)}"
        )
    if not isinstance(raw, dict):
        raise ConfigurationError(f"[providers.{name}] must be a table")
    try:
        return cls(**raw)
    except TypeError as e:
        raise ConfigurationError(f"Invalid [providers.{name}] settings: {e}") from e


def _build_providers(raw: RawConfig) -> dict[str, Proxmox | GCP | AWS]:
    if not raw:
        return {"gcp": GCP(), "aws": AWS()}
    return {name: _build_provider(name, section) for name, section in raw.items()}


def _positive_float(value: Any, key: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"'{key}' must be a number, got {value!r}") from None
    if number < 0:
        raise ConfigurationError(f"'{key}' must not be negative, got {number}")
    return number


def resolve_settings(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    config = load_config(project_dir=project_dir, global_path=global_path)
    env = os.environ if environ is None else environ

    api = config["api"]
    console = config["console"]

    api_url = env.get(ENV_API_URL) or api.get("base_url") or DEFAULT_API_URL
    if not api_url.startswith(("http://", "https://")):
        raise ConfigurationError(f"API URL must be http(s), got '{api_url}'")

    timeout = api.get("timeout")
    try:
        log_config = LogConfig(**config["logging"])
    except TypeError as e:
        raise ConfigurationError(f"Invalid [logging] settings: {e}") from e

    return Settings(
        api_url=api_url,
        token=env.get(ENV_API_TOKEN) or api.get("token"),
        timeout=_positive_float(timeout, "api.timeout") if timeout is not None else None,
        providers=_build_providers(config["providers"]),
        management_path=console.get("management_path", DEFAULT_MANAGEMENT_PATH),
        redirect_delay=_positive_float(
            console.get("redirect_delay", DEFAULT_REDIRECT_DELAY), "console.redirect_delay",
        ),
        preferences_path=Path(console.get("preferences_path", DEFAULT_PREFERENCES_PATH)).expanduser(),
        logging=log_config,
    )
