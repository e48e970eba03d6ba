"""
Configuration loader for zkb-stats.

Loads YAML constants and the static ship name table, and builds the settings
objects handed to the fetch clients and aggregators.
"""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass, field, replace
from typing import Optional

import yaml

from zkb_stats.errors import ConfigurationError


CONFIG_DIR = Path(__file__).parent


@dataclass(frozen=True)
class FetchSettings:
    """Settings for the zKillboard/ESI clients."""
    cache_root: Path
    zkillboard_url: str = "https://zkillboard.com/api"
    esi_url: str = "https://esi.evetech.net/latest"
    user_agent: str = "zkb-stats-tool"
    list_timeout: float = 30.0
    detail_timeout: float = 30.0
    names_timeout: float = 60.0
    page_delay: float = 2.0
    detail_delay: float = 0.1
    detail_jitter: float = 0.1
    max_retries: int = 3
    retry_backoff: float = 1.0
    retry_statuses: tuple[int, ...] = (429, 500, 502, 503, 504)
    name_batch_size: int = 1000
    killmail_dir: str = "killmails"
    character_file: str = "characters.json"


@dataclass(frozen=True)
class StatsSettings:
    """Settings for the aggregators and report."""
    capsule_type_id: int = 670
    capsule_name: str = "Capsule"
    report_top: int = 100
    output_dir: Path = field(default_factory=lambda: Path("docs"))


# Cached configuration data
_constants: Optional[dict] = None
_ship_names: Optional[dict] = None


def load_constants() -> dict:
    """
    Load constants from config/constants.yaml.

    Returns:
        Dict with API URLs, rate limits, cache layout and defaults
    """
    global _constants
    if _constants is not None:
        return _constants

    constants_path = CONFIG_DIR / "constants.yaml"
    if not constants_path.exists():
        raise FileNotFoundError(f"Constants config not found: {constants_path}")

    with open(constants_path, 'r') as f:
        _constants = yaml.safe_load(f)

    return _constants


def load_ship_names() -> dict[int, str]:
    """
    Load the static ship type ID to name table from config/ship_names.yaml.

    Returns:
        Dict mapping ship type IDs (e.g., 587) to names (e.g., 'Rifter')
    """
    global _ship_names
    if _ship_names is not None:
        return _ship_names

    ships_path = CONFIG_DIR / "ship_names.yaml"
    if not ships_path.exists():
        raise FileNotFoundError(f"Ship names config not found: {ships_path}")

    with open(ships_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    _ship_names = {int(type_id): str(name) for type_id, name in data.get('ships', {}).items()}
    return _ship_names


def get_fetch_settings(cache_root: Path | str | None = None, **overrides) -> FetchSettings:
    """
    Build fetch settings from constants.yaml.

    Args:
        cache_root: Cache directory (defaults to cache.root from constants)
        **overrides: Field overrides, e.g. user_agent or page_delay

    Returns:
        FetchSettings instance
    """
    constants = load_constants()
    api = constants.get('api', {})
    rate = constants.get('rate_limit', {})
    cache = constants.get('cache', {})

    if cache_root is None:
        cache_root = cache.get('root', 'cache')

    settings = FetchSettings(
        cache_root=Path(cache_root),
        zkillboard_url=api.get('zkillboard_url', FetchSettings.zkillboard_url),
        esi_url=api.get('esi_url', FetchSettings.esi_url),
        user_agent=api.get('user_agent', FetchSettings.user_agent),
        list_timeout=float(api.get('list_timeout', 30)),
        detail_timeout=float(api.get('detail_timeout', 30)),
        names_timeout=float(api.get('names_timeout', 60)),
        page_delay=float(rate.get('page_delay', 2.0)),
        detail_delay=float(rate.get('detail_delay', 0.1)),
        detail_jitter=float(rate.get('detail_jitter', 0.1)),
        max_retries=int(rate.get('max_retries', 3)),
        retry_backoff=float(rate.get('retry_backoff', 1.0)),
        retry_statuses=tuple(rate.get('retry_statuses', FetchSettings.retry_statuses)),
        name_batch_size=int(constants.get('names', {}).get('batch_size', 1000)),
        killmail_dir=cache.get('killmail_dir', 'killmails'),
        character_file=cache.get('character_file', 'characters.json'),
    )

    overrides = {k: v for k, v in overrides.items() if v is not None}
    return replace(settings, **overrides) if overrides else settings


def get_stats_settings(**overrides) -> StatsSettings:
    """Build aggregator/report settings from constants.yaml."""
    constants = load_constants()
    stats = constants.get('stats', {})
    report = constants.get('report', {})

    settings = StatsSettings(
        capsule_type_id=int(stats.get('capsule_type_id', 670)),
        capsule_name=stats.get('capsule_name', 'Capsule'),
        report_top=int(report.get('top', 100)),
        output_dir=Path(report.get('output_dir', 'docs')),
    )

    overrides = {k: v for k, v in overrides.items() if v is not None}
    return replace(settings, **overrides) if overrides else settings


def validate_corporation_id(value) -> int:
    """
    Parse and validate a corporation ID.

    Raises:
        ConfigurationError: If the value is not a positive integer
    """
    try:
        corporation_id = int(str(value).strip())
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid corporation ID: {value!r}") from None

    if corporation_id <= 0:
        raise ConfigurationError(f"Invalid corporation ID: {value!r}")
    return corporation_id


def validate_period(year, month) -> tuple[int, int]:
    """
    Parse and validate a year/month pair.

    Raises:
        ConfigurationError: If either value is non-numeric or out of range
    """
    try:
        year_int = int(str(year).strip())
        month_int = int(str(month).strip())
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid period: year={year!r}, month={month!r}") from None

    # EVE Online launched in 2003
    if year_int < 2003 or year_int > 9999:
        raise ConfigurationError(f"Invalid year: {year!r}")
    if not 1 <= month_int <= 12:
        raise ConfigurationError(f"Invalid month: {month!r}")
    return year_int, month_int


def clear_cache():
    """Clear cached configuration data (useful for testing)."""
    global _constants, _ship_names
    _constants = None
    _ship_names = None
