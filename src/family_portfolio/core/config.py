"""Application configuration, kept in config.json at the project root."""

import dataclasses
import json
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    family_name: str = ""
    currency: str = "USD"
    currency_symbol: str = "$"
    allocation_tolerance: Decimal = Decimal("0.01")
    activity_limit: int = 5


# Fields not listed here are stored as plain strings.
_PARSERS = {
    "allocation_tolerance": lambda v: Decimal(str(v)),
    "activity_limit": int,
}

_cached: Optional[AppConfig] = None


def _config_path() -> Path:
    from ..data.database import _find_project_root
    return _find_project_root() / "config.json"


def _from_dict(data: dict) -> AppConfig:
    values = {}
    for f in dataclasses.fields(AppConfig):
        if f.name in data:
            values[f.name] = _PARSERS.get(f.name, str)(data[f.name])
    return AppConfig(**values)


def _load(path: Path) -> AppConfig:
    if not path.exists():
        return AppConfig()
    try:
        return _from_dict(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, ValueError, TypeError, InvalidOperation) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return AppConfig()


def get_config() -> AppConfig:
    global _cached
    if _cached is None:
        _cached = _load(_config_path())
    return _cached


def save_config(cfg: AppConfig) -> None:
    global _cached
    data = {
        name: str(value) if isinstance(value, Decimal) else value
        for name, value in dataclasses.asdict(cfg).items()
    }
    _config_path().write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    _cached = cfg


def reset_config_cache() -> None:
    global _cached
    _cached = None
