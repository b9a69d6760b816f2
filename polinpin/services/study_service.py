import logging
from typing import Optional

from polinpin.core.errors import NotEnoughObservationsError, StudyNotFoundError
from polinpin.models.observation import Observation, StudyResults, StudyStatistics
from polinpin.models.study import Node, Study, Task
from polinpin.services.observation_log import ObservationLog
from polinpin.services.study_statistics import MIN_OBSERVATIONS, summarize
from polinpin.services.study_store import StudyStore

logger = logging.getLogger(__name__)


def _node(id: str, label: str, *children: Node) -> Node:
    return Node(id=id, label=label, children=list(children))


def default_study() -> Study:
    tree = _node("homepage", "Homepage",
        _node("shop", "Shop"),
        _node("settings", "Settings"),
        _node("account", "My Account",
            _node("upgrade", "Upgrade my plan"),
            _node("profile", "Profile"),
            _node("balance", "Account balance")))
    tasks = [
        Task(text="Buy a jar.", correct_answer=["shop"]),
        Task(text="Change the colour theme.", correct_answer=["settings"]),
        Task(text="Change your name.", correct_answer=["profile"]),
    ]
    return Study(name="Example Study", tasks=tasks, tree=tree)


class StudyService:
    def __init__(self, store: StudyStore, observations: ObservationLog):
        self.store = store
        self.observations = observations

    def get_study(self, study_id: str) -> Study:
        return self.store.get(study_id)

    def get_or_create_default_study(self, study_id: str = "demo") -> Study:
        """Seed the demo study under ``study_id`` unless something is stored there."""
        try:
            return self.store.get(study_id)
        except StudyNotFoundError:
            study = default_study()
            self.store.put(study_id, study)
            logger.info(f"Seeded demo study under {study_id!r}")
            return study

    def put_study(self, study_id: str, study: Study) -> None:
        self.store.put(study_id, study)

    def complete_study(self, study_id: str, observation: Optional[Observation] = None) -> None:
        """Acknowledge a finished run; the observation, if any, is recorded."""
        if observation is None:
            return
        if study_id not in self.store:
            raise StudyNotFoundError(study_id)
        count = self.observations.append(study_id, observation)
        logger.info(f"Recorded observation #{count} for study {study_id!r}")

    def results(self, study_id: str) -> StudyResults:
        if study_id not in self.store:
            raise StudyNotFoundError(study_id)
        return StudyResults(observations=self.observations.entries(study_id))

    def statistics(self, study_id: str) -> StudyStatistics:
        study = self.store.get(study_id)
        observations = self.observations.entries(study_id)
        if len(observations) < MIN_OBSERVATIONS:
            raise NotEnoughObservationsError(study_id, len(observations), MIN_OBSERVATIONS)
        return summarize(observations, study.tree)
