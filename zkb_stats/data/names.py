"""
Character name resolution with memory and file caches.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from zkb_stats.data.cache import read_json, write_json_atomic
from zkb_stats.data.esi import MAX_NAME_BATCH, ESIClient
from zkb_stats.errors import BatchResolutionError

logger = logging.getLogger(__name__)


def fallback_name(character_id: int, raw_name: Optional[str] = None) -> str:
    """Display name for a character the resolver could not name."""
    if raw_name:
        return f"{raw_name} ({character_id})"
    return f"Character_{character_id}"


class CharacterNameResolver:
    """
    Resolves character IDs to names.

    Lookup order is the in-process cache, then {cache_root}/characters.json,
    then ESI in batches of at most batch_size IDs. Only 'character' entries are
    kept. IDs that cannot be resolved are left out of the result.
    """

    def __init__(
        self,
        esi: ESIClient,
        cache_root: Path | str,
        cache_file: str = "characters.json",
        batch_size: int = MAX_NAME_BATCH,
    ):
        if not 0 < batch_size <= MAX_NAME_BATCH:
            raise ValueError(f"batch_size must be between 1 and {MAX_NAME_BATCH}")
        self.esi = esi
        self.cache_path = Path(cache_root) / cache_file
        self.batch_size = batch_size
        self._memory: dict[int, str] = {}

    def _read_file_cache(self) -> dict[int, str]:
        data = read_json(self.cache_path) or {}
        names = {}
        for raw_id, name in data.items():
            try:
                names[int(raw_id)] = str(name)
            except ValueError:
                continue
        return names

    def _save_file_cache(self, new_names: dict[int, str]) -> None:
        merged = self._read_file_cache()
        merged.update(new_names)
        write_json_atomic(self.cache_path, {str(k): v for k, v in sorted(merged.items())})
        logger.debug("Character cache now holds %d names", len(merged))

    def _fetch_batch(self, batch: list[int]) -> dict[int, str]:
        try:
            entries = self.esi.post_names(batch)
        except BatchResolutionError as e:
            logger.warning("Failed to resolve %d character names: %s", len(batch), e)
            return {}

        names = {}
        for entry in entries:
            if not isinstance(entry, dict) or entry.get('category') != 'character':
                continue
            name = entry.get('name')
            try:
                character_id = int(entry['id'])
            except (KeyError, TypeError, ValueError):
                logger.debug("Skipping malformed name entry: %r", entry)
                continue
            if name:
                names[character_id] = str(name)
        return names

    def resolve_names(self, ids: Iterable[int]) -> dict[int, str]:
        """
        Resolve character IDs to names.

        Args:
            ids: Character IDs (duplicates are ignored)

        Returns:
            Dict mapping character ID -> name for every ID that could be resolved
        """
        unique_ids = sorted({int(i) for i in ids})
        if not unique_ids:
            return {}

        file_cache = self._read_file_cache()
        names: dict[int, str] = {}
        uncached: list[int] = []

        for character_id in unique_ids:
            if character_id in self._memory:
                names[character_id] = self._memory[character_id]
            elif character_id in file_cache:
                names[character_id] = file_cache[character_id]
                self._memory[character_id] = file_cache[character_id]
            else:
                uncached.append(character_id)

        if not uncached:
            return names

        logger.info(
            "Character cache hit %d/%d, resolving %d via ESI",
            len(unique_ids) - len(uncached), len(unique_ids), len(uncached),
        )

        for start in range(0, len(uncached), self.batch_size):
            batch = uncached[start:start + self.batch_size]
            batch_names = self._fetch_batch(batch)
            if not batch_names:
                continue
            names.update(batch_names)
            self._memory.update(batch_names)
            self._save_file_cache(batch_names)

        return names

    def get_character_name(self, character_id: int) -> Optional[str]:
        """Resolve a single character ID, or None if it cannot be named."""
        if character_id in self._memory:
            return self._memory[character_id]
        return self.resolve_names([character_id]).get(character_id)

    def clear_cache(self) -> None:
        """Drop the in-process cache. The file cache is left alone."""
        self._memory.clear()
