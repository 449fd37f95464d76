"""Agency Portal — Kanban Task Models."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class TaskStatus(str, Enum):
    """Pipeline stages, in board order."""

    TODO = "A Fazer"
    IN_PROGRESS = "Em Progresso"
    REVIEW = "Revisão"
    DONE = "Concluído"


class TaskPriority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


PIPELINE: List[TaskStatus] = list(TaskStatus)


def move_status(current: TaskStatus, direction: str) -> TaskStatus:
    """Step one column left ("prev") or right ("next"), clamped at the ends."""
    if direction not in ("next", "prev"):
        raise ValueError(f"Unknown direction: {direction}")
    idx = PIPELINE.index(current) + (1 if direction == "next" else -1)
    return PIPELINE[max(0, min(idx, len(PIPELINE) - 1))]


class Task(SQLModel, table=True):
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    client_id: Optional[str] = Field(default=None, index=True, foreign_key="clients.id")
    title: str
    assignee: str = ""
    status: TaskStatus = Field(default=TaskStatus.TODO)
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    due_date: str = Field(default="", description="YYYY-MM-DD")
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))


class TaskCreate(BaseModel):
    client_id: Optional[str] = None
    title: str
    assignee: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: str = ""
    tags: List[str] = []
