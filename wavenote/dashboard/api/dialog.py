from fastapi import APIRouter, Depends

from wavenote.dashboard.api.tasks import task_lists_out
from wavenote.dashboard.dependencies import find_task_or_404, get_dashboard
from wavenote.models.dialog import DialogState
from wavenote.services import Dashboard
from wavenote.shared.schemas import DialogOut, FieldChange, SubmitResult

router = APIRouter(prefix="/api/dialog", tags=["dialog"])


def dialog_out(state: DialogState) -> DialogOut:
    return DialogOut(**state.to_dict())


@router.get("/", response_model=DialogOut)
async def get_dialog(dashboard: Dashboard = Depends(get_dashboard)):
    return dialog_out(dashboard.dialog.state)


@router.post("/open", response_model=DialogOut)
async def open_for_add(dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.dialog.open_for_add()
    return dialog_out(dashboard.dialog.state)


@router.post("/edit/{task_id}", response_model=DialogOut)
async def open_for_edit(task_id: str, dashboard: Dashboard = Depends(get_dashboard)):
    task = find_task_or_404(dashboard, task_id)
    dashboard.dialog.open_for_edit(task)
    return dialog_out(dashboard.dialog.state)


@router.post("/close", response_model=DialogOut)
async def close_dialog(dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.dialog.close()
    return dialog_out(dashboard.dialog.state)


@router.patch("/fields", response_model=DialogOut)
async def change_field(change: FieldChange, dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.dialog.on_field_change(change.name, change.value)
    return dialog_out(dashboard.dialog.state)


@router.post("/submit", response_model=SubmitResult)
async def submit_dialog(dashboard: Dashboard = Depends(get_dashboard)):
    """Validate the form and save the task; validation messages come back in the dialog state"""
    saved = await dashboard.dialog.submit()
    return SubmitResult(
        saved=saved,
        dialog=dialog_out(dashboard.dialog.state),
        tasks=task_lists_out(dashboard)
    )
