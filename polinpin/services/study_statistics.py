import statistics
from typing import List

from polinpin.models.observation import Observation, StudyStatistics
from polinpin.models.study import Node

MIN_OBSERVATIONS = 3


def _share(hits: int, total: int) -> float:
    return hits / total if total else 0.0


def summarize(observations: List[Observation], tree: Node) -> StudyStatistics:
    """Timing and accuracy figures over all recorded runs of one study.

    Runs without any answered task carry no timing and are left out of the
    time figures; percentages are fractions of all answered tasks.
    """
    times = [o.time_taken for o in observations if o.time_taken is not None]
    points = [point for o in observations for point in o.observations]

    return StudyStatistics(
        median_time=float(statistics.median(times)) if times else 0.0,
        minimum_time=float(min(times)) if times else 0.0,
        maximum_time=float(max(times)) if times else 0.0,
        percent_correct=_share(sum(1 for p in points if p.question.correct), len(points)),
        percent_direct=_share(sum(1 for p in points if p.is_direct(tree)), len(points)),
    )
