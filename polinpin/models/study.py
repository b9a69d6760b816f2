from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Node(BaseModel):
    id: str
    label: str
    children: List["Node"] = []

    def contains(self, node_id: str) -> bool:
        """True if this node or any of its descendants has the given id."""
        return self.id == node_id or any(child.contains(node_id) for child in self.children)

    def find(self, node_id: str) -> Optional["Node"]:
        if self.id == node_id:
            return self
        for child in self.children:
            found = child.find(node_id)
            if found is not None:
                return found
        return None

    def node_ids(self) -> List[str]:
        ids = [self.id]
        for child in self.children:
            ids.extend(child.node_ids())
        return ids


class Task(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    correct_answer: List[str] = Field(alias="correctAnswer", min_length=1)

    def is_correct(self, answer: str) -> bool:
        return answer in self.correct_answer


class Study(BaseModel):
    name: str
    tasks: List[Task] = []
    tree: Node
