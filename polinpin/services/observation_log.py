import threading
from typing import Dict, List

from polinpin.models.observation import Observation


class ObservationLog:
    """Append-only record of completed study runs, per study id."""

    def __init__(self):
        self._observations: Dict[str, List[Observation]] = {}
        self._lock = threading.Lock()

    def append(self, study_id: str, observation: Observation) -> int:
        record = observation.model_copy(deep=True)
        with self._lock:
            entries = self._observations.setdefault(study_id, [])
            entries.append(record)
            return len(entries)

    def entries(self, study_id: str) -> List[Observation]:
        with self._lock:
            entries = list(self._observations.get(study_id, []))
        return [entry.model_copy(deep=True) for entry in entries]
