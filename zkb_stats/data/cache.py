"""
Per-partition killmail cache.

One JSON file per partition key under {cache_root}/killmails/. Records are
never expired or rewritten: a killmail ID plus hash always names the same
record.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Mapping

from zkb_stats.data.killmail import Killmail, PartitionKey

logger = logging.getLogger(__name__)


def write_json_atomic(path: Path, data) -> None:
    """Write JSON to a temp file beside path and rename it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def read_json(path: Path) -> dict | None:
    """Read a JSON object, returning None if the file is missing or unreadable."""
    if not path.exists():
        return None
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable cache file %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring cache file %s: expected a JSON object", path)
        return None
    return data


class KillmailCache:
    """Persisted mapping of killmail ID -> Killmail, partitioned by PartitionKey."""

    def __init__(self, cache_root: Path | str, killmail_dir: str = "killmails"):
        self.cache_root = Path(cache_root)
        self.directory = self.cache_root / killmail_dir

    def partition_path(self, key: PartitionKey) -> Path:
        return self.directory / f"{key.cache_name}.json"

    def get(self, key: PartitionKey) -> dict[int, Killmail]:
        """
        Load a partition.

        Returns:
            Dict mapping killmail ID -> Killmail; empty if the partition is absent
        """
        path = self.partition_path(key)
        data = read_json(path)
        if not data:
            return {}

        records = {}
        for raw_id, raw in data.items():
            try:
                records[int(raw_id)] = Killmail.from_dict(raw)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed cache entry %s in %s: %s", raw_id, path.name, e)
        return records

    def put(self, key: PartitionKey, records: Mapping[int, Killmail]) -> None:
        """Persist the full partition, replacing the file atomically."""
        data = {str(killmail_id): km.to_dict() for killmail_id, km in records.items()}
        write_json_atomic(self.partition_path(key), data)
        logger.debug("Saved %d killmails to %s", len(data), self.partition_path(key).name)

    def merge(self, key: PartitionKey, records: Mapping[int, Killmail]) -> dict[int, Killmail]:
        """
        Add records to a partition without touching IDs already stored.

        Returns:
            The merged partition as written
        """
        merged = self.get(key)
        for killmail_id, km in records.items():
            merged.setdefault(killmail_id, km)
        self.put(key, merged)
        return merged
