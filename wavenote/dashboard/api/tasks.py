from fastapi import APIRouter, Depends, HTTPException

from wavenote.dashboard.dependencies import find_task_or_404, get_dashboard
from wavenote.models.task import Task
from wavenote.services import Dashboard, TaskNotFoundError
from wavenote.shared.schemas import TaskListsOut, TaskOut

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def task_out(task: Task) -> TaskOut:
    return TaskOut(
        task_id=task.task_id,
        title=task.title,
        description=task.description,
        deadline=task.deadline,
        completed=task.completed
    )


def task_lists_out(dashboard: Dashboard) -> TaskListsOut:
    return TaskListsOut(
        uncompleted=[task_out(t) for t in dashboard.uncompleted_tasks],
        completed=[task_out(t) for t in dashboard.completed_tasks]
    )


@router.get("/", response_model=TaskListsOut)
async def get_tasks(dashboard: Dashboard = Depends(get_dashboard)):
    """Unfinished and completed tasks of the signed-in user, in fetch order"""
    return task_lists_out(dashboard)


@router.post("/{task_id}/toggle", response_model=TaskListsOut)
async def toggle_task(task_id: str, dashboard: Dashboard = Depends(get_dashboard)):
    try:
        await dashboard.task_service.toggle_completion(task_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return task_lists_out(dashboard)


@router.delete("/{task_id}", response_model=TaskListsOut)
async def delete_task(task_id: str, dashboard: Dashboard = Depends(get_dashboard)):
    await dashboard.task_service.delete(task_id)
    return task_lists_out(dashboard)


@router.post("/{task_id}/duplicate", response_model=TaskListsOut)
async def duplicate_task(task_id: str, dashboard: Dashboard = Depends(get_dashboard)):
    if dashboard.session.is_authenticated:
        task = find_task_or_404(dashboard, task_id)
        await dashboard.task_service.duplicate(task)
    return task_lists_out(dashboard)
