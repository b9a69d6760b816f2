from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from polinpin.models.study import Node, Task


class PastSelection(BaseModel):
    node: str
    at: int


class AnsweredTask(BaseModel):
    task: Task
    answer: str

    @property
    def correct(self) -> bool:
        return self.task.is_correct(self.answer)


class ObservationPoint(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: AnsweredTask
    past_selections: List[PastSelection] = Field(default=[], alias="pastSelections")
    started_at: int = Field(alias="startedAt")
    ended_at: int = Field(alias="endedAt")

    @property
    def time_taken(self) -> int:
        return self.ended_at - self.started_at

    def is_direct(self, tree: Node) -> bool:
        """True when every selection lies below the previous one, i.e. no backtracking."""
        node = tree
        for selection in self.past_selections:
            found = node.find(selection.node)
            if found is None:
                return False
            node = found
        return True


class Observation(BaseModel):
    observations: List[ObservationPoint] = []

    @property
    def time_taken(self) -> Optional[int]:
        if not self.observations:
            return None
        return self.observations[-1].ended_at - self.observations[0].started_at


class StudyResults(BaseModel):
    observations: List[Observation] = []


class StudyStatistics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    median_time: float = Field(alias="medianTime")
    minimum_time: float = Field(alias="minimumTime")
    maximum_time: float = Field(alias="maximumTime")
    # Share of answers matching the task's correct answers
    percent_correct: float = Field(alias="percentCorrect")
    # Share of answers reached without backtracking
    percent_direct: float = Field(alias="percentDirect")
