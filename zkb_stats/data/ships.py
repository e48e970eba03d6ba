"""
Ship type name lookup backed by the static table in config/ship_names.yaml.
"""

from __future__ import annotations

from zkb_stats.config.loader import load_ship_names


def ship_type_name(type_id: int) -> str:
    """Name for a ship type ID, or 'ShipType_<id>' if the table has no entry."""
    return load_ship_names().get(type_id, f"ShipType_{type_id}")
