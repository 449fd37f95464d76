"""Agency Portal — Kanban Task Routes."""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlmodel import Session, select

from app.database import get_session
from app.models.task_models import Task, TaskCreate, TaskStatus, move_status

router = APIRouter(prefix="/tasks", tags=["Tasks"])


class StatusUpdate(BaseModel):
    status: TaskStatus


def _get_task(session: Session, task_id: int) -> Task:
    task = session.get(Task, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return task


@router.get("", response_model=List[Task])
async def list_tasks(
    client_id: Optional[str] = Query(None, description="Client id, or 'all'"),
    session: Session = Depends(get_session),
):
    query = select(Task).order_by(Task.id)
    if client_id and client_id != "all":
        query = query.where(Task.client_id == client_id)
    return session.exec(query).all()


@router.post("", response_model=Task, status_code=201)
async def add_task(request: TaskCreate, session: Session = Depends(get_session)):
    task = Task(**request.model_dump())
    session.add(task)
    session.commit()
    session.refresh(task)
    return task


@router.patch("/{task_id}/status", response_model=Task)
async def update_task_status(
    task_id: int,
    request: StatusUpdate,
    session: Session = Depends(get_session),
):
    task = _get_task(session, task_id)
    task.status = request.status
    session.add(task)
    session.commit()
    session.refresh(task)
    return task


@router.post("/{task_id}/move", response_model=Task)
async def move_task(
    task_id: int,
    direction: Literal["next", "prev"] = Query(...),
    session: Session = Depends(get_session),
):
    """Move a card one column along the board."""
    task = _get_task(session, task_id)
    task.status = move_status(task.status, direction)
    session.add(task)
    session.commit()
    session.refresh(task)
    return task
