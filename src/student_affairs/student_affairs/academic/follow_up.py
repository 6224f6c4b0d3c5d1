"""Follow-up triage of academic absences.

Acknowledging an absence is a local, advisory note kept outside the backend
(the server-side analogue of a browser-local key). It only hides the row from
the pending list and is never used as a source of truth for counts.
"""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Iterable, Protocol, Sequence, Set

from ..core.enums import EventKind
from ..core.exceptions import NotFoundError
from ..recap.engine import follow_up_list
from ..recap.model import DenormalizedRecord
from .repository import AcademicRepository

logger = logging.getLogger(__name__)


class FollowUpAcknowledgmentStore(Protocol):
    def has(self, absence_id: int) -> bool:
        raise NotImplementedError

    def add(self, absence_id: int) -> None:
        raise NotImplementedError

    def discard(self, absence_id: int) -> None:
        raise NotImplementedError

    def ids(self) -> Set[int]:
        raise NotImplementedError


class InMemoryAcknowledgmentStore:
    def __init__(self, ids: Iterable[int] = ()):
        self._ids = {int(i) for i in ids}

    def has(self, absence_id: int) -> bool:
        return int(absence_id) in self._ids

    def add(self, absence_id: int) -> None:
        self._ids.add(int(absence_id))

    def discard(self, absence_id: int) -> None:
        self._ids.discard(int(absence_id))

    def ids(self) -> Set[int]:
        return set(self._ids)


class JsonFileAcknowledgmentStore:
    """JSON array of acknowledged absence ids persisted in a local file."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Set[int]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return set()
        except OSError as e:
            logger.warning("Cannot read %s: %s", self._path, e)
            return set()

        try:
            data = json.loads(raw) if raw.strip() else []
            return {int(i) for i in data}
        except (ValueError, TypeError) as e:
            logger.warning("Ignoring corrupt follow-up store %s: %s", self._path, e)
            return set()

    def _write(self, ids: Set[int]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(sorted(ids)), encoding="utf-8")
        tmp.replace(self._path)

    def has(self, absence_id: int) -> bool:
        return int(absence_id) in self._read()

    def add(self, absence_id: int) -> None:
        with self._lock:
            ids = self._read()
            ids.add(int(absence_id))
            self._write(ids)

    def discard(self, absence_id: int) -> None:
        with self._lock:
            ids = self._read()
            if int(absence_id) in ids:
                ids.discard(int(absence_id))
                self._write(ids)

    def ids(self) -> Set[int]:
        return self._read()


class FollowUpService:
    def __init__(self, academic: AcademicRepository, store: FollowUpAcknowledgmentStore):
        self._academic = academic
        self._store = store

    def pending(self, records: Sequence[DenormalizedRecord]) -> list[DenormalizedRecord]:
        return follow_up_list(records, self._store.ids())

    def confirm(self, absence_id: int) -> None:
        self._store.add(int(absence_id))
        logger.info("Follow-up confirmed for absence id=%s", absence_id)

    def delete_absence(self, absence_id: int) -> None:
        """Delete the absence in the backend, then forget any acknowledgment."""
        if not self._academic.delete_absence(int(absence_id)):
            raise NotFoundError("Record not found")
        self._store.discard(int(absence_id))
        logger.info("Deleted %s id=%s from follow-up", EventKind.ACADEMIC_ABSENCE.value, absence_id)
