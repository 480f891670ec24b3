"""Config file loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from plansync.core.contracts.config import PlanSyncConfig
from plansync.core.contracts.exceptions import ConfigError

_LOG = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "plansync.json"


def _resolve_storage_dir(value: Path, *, base_dir: Path) -> Path:
    storage_dir = value.expanduser()
    if not storage_dir.is_absolute():
        storage_dir = (base_dir / storage_dir).resolve()
    if storage_dir.exists() and not storage_dir.is_dir():
        raise ConfigError(f"storage_dir is not a directory: {storage_dir}")
    return storage_dir


def load_config(path: str | Path) -> PlanSyncConfig:
    """Load and validate ``plansync.json``.

    A relative ``storage_dir`` is taken relative to the directory holding the
    config file, not the working directory.

    Raises:
        ConfigError: The file is unreadable, is not JSON, or fails validation.
    """
    config_path = Path(path).expanduser().resolve()

    try:
        raw_payload: Any = json.loads(config_path.read_text(encoding="utf-8"))
        parsed = PlanSyncConfig.model_validate(raw_payload)
    except OSError as exc:
        raise ConfigError(f"failed reading config file: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in config file: {config_path}") from exc
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc

    config = parsed.model_copy(
        update={"storage_dir": _resolve_storage_dir(parsed.storage_dir, base_dir=config_path.parent)}
    )
    if config.remote.kind == "memory":
        _LOG.warning("Remote kind 'memory' keeps remote documents for this process only")
    _LOG.debug("Loaded config %s (storage %s, user %s)", config_path, config.storage_dir, config.user_id)
    return config
