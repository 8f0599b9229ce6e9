"""
Persistence service for the Practice Planner application.

This module stores practice instances in memory or in a JSON file and
answers the queries the series coordinator needs (lookup by series id).
"""
import json
import os
from contextlib import contextmanager
from datetime import date, datetime, time
from typing import Dict, Iterator, List, Optional

from loguru import logger

from ..models import PracticeInstance


class PracticeNotFoundError(KeyError):
    """Raised when a practice id is not in the store."""

    def __init__(self, practice_id: str):
        self.practice_id = practice_id
        super().__init__(practice_id)

    def __str__(self) -> str:
        return f"Practice not found: {self.practice_id}"


class PracticeStore:
    """
    In-memory practice store.

    Writes made inside ``batch()`` are all-or-nothing: if the block raises,
    the store is restored to its state before the batch.
    """

    def __init__(self) -> None:
        self._practices: Dict[str, PracticeInstance] = {}
        self._batch_depth = 0

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def create_instance(self, practice: PracticeInstance) -> PracticeInstance:
        """
        Store a new practice.

        Raises:
            ValueError: If a practice with the same id already exists
        """
        if practice.id in self._practices:
            raise ValueError(f"Practice already exists: {practice.id}")
        previous = dict(self._practices)
        self._practices[practice.id] = practice.copy()
        self._changed(previous)
        return practice

    def update_instance(self, practice: PracticeInstance) -> PracticeInstance:
        """
        Replace a stored practice.

        Raises:
            PracticeNotFoundError: If the practice does not exist
        """
        if practice.id not in self._practices:
            raise PracticeNotFoundError(practice.id)
        previous = dict(self._practices)
        self._practices[practice.id] = practice.copy()
        self._changed(previous)
        return practice

    def delete_instance(self, practice_id: str) -> None:
        """
        Remove a practice.

        Raises:
            PracticeNotFoundError: If the practice does not exist
        """
        if practice_id not in self._practices:
            raise PracticeNotFoundError(practice_id)
        previous = dict(self._practices)
        del self._practices[practice_id]
        self._changed(previous)

    @contextmanager
    def batch(self) -> Iterator["PracticeStore"]:
        """
        Group several writes so they land together or not at all.

        The store is flushed once, when the outermost batch completes. If
        the block or that flush raises, the in-memory state is restored.
        """
        backup = dict(self._practices)
        self._batch_depth += 1
        try:
            yield self
        except Exception:
            self._practices = backup
            raise
        finally:
            self._batch_depth -= 1
        self._changed(backup)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_instance(self, practice_id: str) -> PracticeInstance:
        """
        Fetch one practice.

        Raises:
            PracticeNotFoundError: If the practice does not exist
        """
        try:
            return self._practices[practice_id].copy()
        except KeyError:
            raise PracticeNotFoundError(practice_id) from None

    def query_by_series_id(self, series_id: Optional[str]) -> List[PracticeInstance]:
        """Return every practice in a series, ordered by start time."""
        if series_id is None:
            return []
        return sorted(
            (p.copy() for p in self._practices.values() if p.series_id == series_id),
            key=lambda p: p.start_time,
        )

    def list_instances(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[PracticeInstance]:
        """
        Return practices ordered by start time, optionally within a date window.

        Args:
            start: Keep practices starting on or after this date
            end: Keep practices starting on or before this date (inclusive)
        """
        lower = datetime.combine(start, time.min) if start else None
        upper = datetime.combine(end, time.max) if end else None
        return sorted(
            (
                p.copy() for p in self._practices.values()
                if (lower is None or p.start_time >= lower)
                and (upper is None or p.start_time <= upper)
            ),
            key=lambda p: p.start_time,
        )

    def __len__(self) -> int:
        return len(self._practices)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _changed(self, previous: Dict[str, PracticeInstance]) -> None:
        """Flush outside a batch, restoring ``previous`` if the flush fails."""
        if self._batch_depth > 0:
            return
        try:
            self.flush()
        except Exception:
            self._practices = previous
            logger.error("Flush failed; in-memory changes rolled back", count=len(previous))
            raise

    def flush(self) -> None:
        """Hook for durable stores; the in-memory store has nothing to write."""


class JsonPracticeStore(PracticeStore):
    """
    Practice store persisted to a JSON file.

    Each write outside a batch rewrites the file; a batch writes it once
    when it completes successfully.
    """

    def __init__(self, file_path: str):
        super().__init__()
        self.file_path = file_path
        if os.path.exists(file_path):
            self._load()

    def flush(self) -> None:
        """
        Write every practice to the JSON file.

        Raises:
            IOError: If file cannot be written
            OSError: If path is invalid
        """
        directory = os.path.dirname(self.file_path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)

        payload = {"practices": [p.to_dict() for p in self.list_instances()]}
        with open(self.file_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        logger.debug("Saved practices", path=self.file_path, count=len(payload["practices"]))

    def _load(self) -> None:
        """
        Load practices from the JSON file.

        Raises:
            json.JSONDecodeError: If file contains invalid JSON
            KeyError: If a practice record is missing a required field
        """
        with open(self.file_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        for record in data.get("practices", []):
            practice = PracticeInstance.from_dict(record)
            self._practices[practice.id] = practice
        logger.info("Loaded practices", path=self.file_path, count=len(self._practices))
