"""Persisted, newest-first scan history and read-only views over it."""

import json
import logging
from typing import Iterable, List, Optional

from pydantic import ValidationError

from .models import HistoryEntry, HistoryFilter, ListingKind
from .sample_data import SAMPLE_HISTORY, SAMPLE_LATEST
from .storage import KeyValueStorage

HISTORY_KEY = "listingRadar_history"

_FILTER_KINDS = {
    HistoryFilter.JOBS: ListingKind.JOB,
    HistoryFilter.APARTMENTS: ListingKind.APARTMENT,
}


def filter_entries(entries: Iterable[HistoryEntry], mode: HistoryFilter) -> List[HistoryEntry]:
    """Keep entries with at least one listing of the requested kind.

    Matching looks at the listings themselves, never at the reported counts.
    """
    mode = HistoryFilter(mode)
    if mode == HistoryFilter.ALL:
        return list(entries)
    kind = _FILTER_KINDS[mode]
    return [entry for entry in entries if entry.result.has_kind(kind)]


class HistoryStore:
    """Append-only scan history backed by a key-value store.

    The whole sequence is re-serialized on every append. Storage problems
    are logged and otherwise ignored: the in-memory history stays correct
    for the lifetime of the process.
    """

    def __init__(self, storage: KeyValueStorage, key: str = HISTORY_KEY):
        self.storage = storage
        self.key = key
        self.logger = logging.getLogger(__name__)
        self._entries: List[HistoryEntry] = []
        self._ids = set()

    def load(self) -> List[HistoryEntry]:
        """Replace the in-memory history with the persisted one."""
        entries: List[HistoryEntry] = []
        try:
            raw = self.storage.get(self.key)
            if raw:
                data = json.loads(raw)
                if not isinstance(data, list):
                    raise ValueError(f"expected a list, got {type(data).__name__}")
                entries = [HistoryEntry.model_validate(item) for item in data]
        except (ValueError, ValidationError) as e:
            self.logger.warning(f"Discarding corrupt scan history: {e}")
            entries = []
        except Exception as e:
            self.logger.warning(f"Could not read scan history: {e}")
            entries = []

        self._entries = entries
        self._ids = {entry.id for entry in entries}
        self.logger.info(f"Loaded {len(entries)} history entries")
        return list(self._entries)

    def append(self, entry: HistoryEntry) -> None:
        """Prepend an entry and persist the full history before returning."""
        if entry.id in self._ids:
            raise ValueError(f"Duplicate history entry id: {entry.id}")

        self._entries.insert(0, entry)
        self._ids.add(entry.id)
        self._persist()

    def _persist(self) -> None:
        payload = json.dumps([e.model_dump(mode="json") for e in self._entries])
        try:
            self.storage.set(self.key, payload)
        except Exception as e:
            self.logger.warning(f"Failed to persist scan history, keeping it in memory: {e}")

    def filter(self, mode: HistoryFilter = HistoryFilter.ALL) -> List[HistoryEntry]:
        return filter_entries(self._entries, mode)

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def latest(self) -> Optional[HistoryEntry]:
        return self._entries[0] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)


class HistoryView:
    """Read-only query layer over history.

    With ``sample_mode`` on, the fixed demo history is served instead.
    The store is never touched in that case.
    """

    def __init__(self, store: HistoryStore, sample_mode: bool = False):
        self.store = store
        self.sample_mode = sample_mode

    def entries(self) -> List[HistoryEntry]:
        if self.sample_mode:
            return list(SAMPLE_HISTORY)
        return self.store.entries

    def latest(self) -> Optional[HistoryEntry]:
        if self.sample_mode:
            return SAMPLE_LATEST
        return self.store.latest()

    def filter(self, mode: HistoryFilter = HistoryFilter.ALL) -> List[HistoryEntry]:
        return filter_entries(self.entries(), mode)

    def stats(self) -> dict:
        entries = self.entries()
        latest = self.latest()
        return {
            "total_scans": len(entries),
            "emails_sent": sum(1 for e in entries if e.result.email_sent),
            "latest_timestamp": latest.timestamp if latest else None,
            "latest_listings_found": latest.result.total_listings_found if latest else 0,
        }
