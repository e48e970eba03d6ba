"""
Configuration loading for zkb-stats.
"""

from zkb_stats.config.loader import (
    FetchSettings,
    StatsSettings,
    clear_cache,
    get_fetch_settings,
    get_stats_settings,
    load_constants,
    load_ship_names,
    validate_corporation_id,
    validate_period,
)

__all__ = [
    'FetchSettings',
    'StatsSettings',
    'clear_cache',
    'get_fetch_settings',
    'get_stats_settings',
    'load_constants',
    'load_ship_names',
    'validate_corporation_id',
    'validate_period',
]
