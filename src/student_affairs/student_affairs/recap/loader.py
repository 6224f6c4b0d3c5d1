from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence

from ..core.constants import DEFAULT_FETCH_WORKERS
from ..core.exceptions import DataAccessError, RecapUnavailableError
from .model import DenormalizedRecord

logger = logging.getLogger(__name__)


class DatasetLoader:
    """Runs the independent fetches of one refresh concurrently.

    Either every fetch succeeds and all results are returned, or a single
    ``RecapUnavailableError`` names each source that failed.
    """

    def __init__(self, max_workers: int = DEFAULT_FETCH_WORKERS):
        self._max_workers = max(1, int(max_workers))

    def load(self, **fetchers: Callable[[], Any]) -> Dict[str, Any]:
        if not fetchers:
            return {}

        workers = min(self._max_workers, len(fetchers))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="recap-fetch") as pool:
            futures = {name: pool.submit(fn) for name, fn in fetchers.items()}

        results: Dict[str, Any] = {}
        failures: Dict[str, DataAccessError] = {}
        for name, future in futures.items():
            try:
                results[name] = future.result()
            except DataAccessError as e:
                logger.warning("Fetch of %s failed: %s", name, e.message)
                failures[name] = e

        if failures:
            raise RecapUnavailableError(failures)
        return results


@dataclass
class AcademicDataset:
    students: Sequence = ()
    classes: Sequence = ()
    courses: Sequence = ()
    permissions: Sequence = ()
    absences: Sequence = ()
    records: List[DenormalizedRecord] = field(default_factory=list)


@dataclass
class DormitoryDataset:
    students: Sequence = ()
    dormitories: Sequence = ()
    permissions: Sequence = ()
    prayer_absences: Sequence = ()
    ceremony_absences: Sequence = ()
    leave_records: List[DenormalizedRecord] = field(default_factory=list)
    absence_records: List[DenormalizedRecord] = field(default_factory=list)
