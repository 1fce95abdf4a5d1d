import logging
from datetime import datetime
from typing import Callable, List

from fastapi import APIRouter, Depends, HTTPException, Request

from task_service.errors import (
    InvalidTaskID,
    RecordDecodeError,
    StorageFailure,
    TaskNotFound,
)
from task_service.models import DEFAULT_STATUS, Task, TaskPayload, TaskUpdate
from task_service.store import TaskStore, new_task_id, parse_task_id

logger = logging.getLogger(__name__)

router = APIRouter()

Clock = Callable[[], datetime]


def get_store(request: Request) -> TaskStore:
    return request.app.state.store


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def _task_id_or_400(raw: str) -> str:
    try:
        return parse_task_id(raw)
    except InvalidTaskID:
        raise HTTPException(status_code=400, detail="Invalid ID")


@router.post("/tasks", status_code=201, response_model=Task)
async def create_task(
    payload: TaskPayload,
    store: TaskStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    if payload.title == "":
        raise HTTPException(status_code=400, detail="Title is required")

    now = clock()
    task = Task(
        id=new_task_id(),
        title=payload.title,
        description=payload.description,
        status=payload.status or DEFAULT_STATUS,
        created_at=now,
        updated_at=now,
    )
    try:
        await store.insert(task)
    except StorageFailure:
        logger.exception("create failed")
        raise HTTPException(status_code=500, detail="Failed to create task")
    logger.info("created task %s", task.id)
    return task


@router.get("/tasks", response_model=List[Task])
async def list_tasks(store: TaskStore = Depends(get_store)):
    try:
        return await store.find_all()
    except RecordDecodeError:
        logger.exception("list failed on a stored record")
        raise HTTPException(status_code=500, detail="Error decoding task data")
    except StorageFailure:
        logger.exception("list failed")
        raise HTTPException(status_code=500, detail="Failed to fetch tasks")


@router.get("/tasks/{task_id}", response_model=Task)
async def get_task(task_id: str, store: TaskStore = Depends(get_store)):
    task_id = _task_id_or_400(task_id)
    try:
        return await store.find_by_id(task_id)
    except TaskNotFound:
        raise HTTPException(status_code=404, detail="Task not found")
    except StorageFailure:
        logger.exception("fetch %s failed", task_id)
        raise HTTPException(status_code=500, detail="Failed to fetch task")


@router.put("/tasks/{task_id}")
async def update_task(
    task_id: str,
    payload: TaskPayload,
    store: TaskStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    task_id = _task_id_or_400(task_id)
    update = TaskUpdate.from_payload(payload, updated_at=clock())
    try:
        matched = await store.update_by_id(task_id, update)
    except StorageFailure:
        logger.exception("update %s failed", task_id)
        raise HTTPException(status_code=500, detail="Failed to update task")
    if matched == 0:
        raise HTTPException(status_code=404, detail="Task not found")
    logger.info("updated task %s", task_id)
    return {"message": "Task updated successfully"}


@router.delete("/tasks/{task_id}")
async def delete_task(task_id: str, store: TaskStore = Depends(get_store)):
    task_id = _task_id_or_400(task_id)
    try:
        deleted = await store.delete_by_id(task_id)
    except StorageFailure:
        logger.exception("delete %s failed", task_id)
        raise HTTPException(status_code=500, detail="Failed to delete task")
    if deleted == 0:
        raise HTTPException(status_code=404, detail="Task not found")
    logger.info("deleted task %s", task_id)
    return {"message": "Task deleted successfully"}
