"""Runtime configuration for the remote-control harness."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from .constants import TIMEOUTS

__all__ = ["ConfigError", "HarnessConfig", "load_config", "DEFAULT_CONFIG_NAME"]

DEFAULT_CONFIG_NAME = "remotenav.json"

_LOGGER = logging.getLogger(__name__)
_TRUE_VALUES = {"1", "true", "yes", "on"}


class ConfigError(RuntimeError):
    """Raised when the runtime configuration cannot be loaded."""


@dataclass(frozen=True)
class HarnessConfig:
    app_url: str = "http://localhost:3000"
    headless: bool = True
    viewport: Tuple[int, int] = (1920, 1080)
    key_delay: float = TIMEOUTS.key_press_delay
    focus_timeout: float = TIMEOUTS.focus_change
    poll_interval: float = TIMEOUTS.polling_interval
    action_timeout: float = TIMEOUTS.default
    ci: bool = False
    debug: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "HarnessConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        values = dict(data)
        if "viewport" in values:
            values["viewport"] = _parse_viewport(values["viewport"])
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "HarnessConfig":
        """Return a copy with every non-``None`` override applied."""

        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


def _parse_viewport(value: Any) -> Tuple[int, int]:
    if isinstance(value, Mapping):
        value = (value.get("width"), value.get("height"))
    try:
        width, height = value
        return int(width), int(height)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid viewport: {value!r}") from exc


def _candidate_config_paths(explicit: Optional[Path]) -> Iterable[Path]:
    if explicit is not None:
        yield explicit
        return
    yield Path.cwd() / DEFAULT_CONFIG_NAME


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if environ.get("APP_URL"):
        overrides["app_url"] = environ["APP_URL"]
    if "CI" in environ:
        overrides["ci"] = bool(environ["CI"])
    if "DEBUG" in environ:
        overrides["debug"] = environ["DEBUG"].strip().lower() == "true"
    if "REMOTENAV_HEADLESS" in environ:
        overrides["headless"] = environ["REMOTENAV_HEADLESS"].strip().lower() in _TRUE_VALUES
    return overrides


def load_config(
    path: Optional[Path | str] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> HarnessConfig:
    """Load the JSON configuration file and apply environment overrides.

    Without ``path`` the file ``remotenav.json`` in the working directory is
    used when it exists; otherwise the defaults apply.  An explicit ``path``
    that does not exist is an error.
    """

    explicit = Path(path).expanduser() if path is not None else None
    data: Dict[str, Any] = {}
    for candidate in _candidate_config_paths(explicit):
        if candidate.is_file():
            try:
                with candidate.open("r", encoding="utf-8") as fp:
                    data = json.load(fp)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"Invalid JSON in {candidate}: {exc}") from exc
            if not isinstance(data, dict):
                raise ConfigError(f"{candidate} must contain a JSON object")
            _LOGGER.info("Loaded configuration from %s", candidate)
            break
    else:
        if explicit is not None:
            raise ConfigError(f"Configuration file not found: {explicit}")

    config = HarnessConfig.from_mapping(data)
    return config.with_overrides(**_env_overrides(os.environ if environ is None else environ))
