import logging
import threading
from typing import Dict, List

from polinpin.core.errors import StudyNotFoundError
from polinpin.models.study import Study

logger = logging.getLogger(__name__)


class StudyStore:
    """In-memory registry of studies keyed by a caller-supplied id.

    Writes replace the whole record (last writer wins). Records are copied on
    the way in and out so callers never hold a reference into the store.
    """

    def __init__(self):
        self._studies: Dict[str, Study] = {}
        self._lock = threading.Lock()

    def get(self, study_id: str) -> Study:
        with self._lock:
            study = self._studies.get(study_id)
        if study is None:
            raise StudyNotFoundError(study_id)
        # Stored records are never mutated in place, so copying outside the lock is safe
        return study.model_copy(deep=True)

    def put(self, study_id: str, study: Study) -> None:
        record = study.model_copy(deep=True)
        with self._lock:
            self._studies[study_id] = record
        logger.info(f"Stored study {study_id!r} ({len(record.tasks)} tasks)")

    def ids(self) -> List[str]:
        with self._lock:
            return list(self._studies)

    def __contains__(self, study_id: str) -> bool:
        with self._lock:
            return study_id in self._studies

    def __len__(self) -> int:
        with self._lock:
            return len(self._studies)
