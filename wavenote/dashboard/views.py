#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
WaveNote - HTML pages
Sign up, login and the task dashboard with its form actions
"""

import logging
from pathlib import Path
from typing import Dict

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from wavenote.config import DashboardSettings
from wavenote.dashboard.dependencies import (
    SESSION_UID_KEY,
    find_task_or_404,
    get_app_settings,
    get_auth_session,
    get_dashboard,
    get_service_manager,
    get_session_id
)
from wavenote.models.dialog import FORM_FIELDS
from wavenote.models.user import AuthError
from wavenote.services import AuthSession, Dashboard, ServiceManager, TaskNotFoundError
from wavenote.utils.datetime_utils import format_deadline
from wavenote.utils.validators import MISSING_CREDENTIALS_MESSAGE

logger = logging.getLogger(__name__)

templates_dir = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(templates_dir))

router = APIRouter(tags=["pages"])


def _to_dashboard() -> RedirectResponse:
    return RedirectResponse(url="/dashboard", status_code=303)


def _apply_form(dashboard: Dashboard, submitted: Dict[str, str]) -> None:
    form = dashboard.dialog.state.form_data
    for name in FORM_FIELDS:
        if submitted[name] != getattr(form, name):
            dashboard.dialog.on_field_change(name, submitted[name])


def _auth_page(request: Request, template: str, settings: DashboardSettings, email: str = "", error: str = "",
               status_code: int = 200) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        template,
        {"title": settings.APP_NAME, "email": email, "error": error},
        status_code=status_code
    )


# ===== AUTHENTICATION PAGES =====

@router.get("/", response_class=HTMLResponse)
@router.get("/signup", response_class=HTMLResponse)
async def signup_page(request: Request, settings: DashboardSettings = Depends(get_app_settings)):
    return _auth_page(request, "signup.html", settings)


@router.post("/signup", response_class=HTMLResponse)
async def signup_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    session: AuthSession = Depends(get_auth_session),
    services: ServiceManager = Depends(get_service_manager),
    settings: DashboardSettings = Depends(get_app_settings)
):
    if not email or not password:
        return _auth_page(request, "signup.html", settings, email, MISSING_CREDENTIALS_MESSAGE, 400)

    try:
        user = await services.auth_service.sign_up(session, email, password)
    except AuthError as e:
        return _auth_page(request, "signup.html", settings, email, e.message, 400)

    request.session[SESSION_UID_KEY] = user.uid
    return _to_dashboard()


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, settings: DashboardSettings = Depends(get_app_settings)):
    return _auth_page(request, "login.html", settings)


@router.post("/login", response_class=HTMLResponse)
async def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    session: AuthSession = Depends(get_auth_session),
    services: ServiceManager = Depends(get_service_manager),
    settings: DashboardSettings = Depends(get_app_settings)
):
    if not email or not password:
        return _auth_page(request, "login.html", settings, email, MISSING_CREDENTIALS_MESSAGE, 400)

    try:
        user = await services.auth_service.log_in(session, email, password)
    except AuthError as e:
        return _auth_page(request, "login.html", settings, email, e.message, 400)

    request.session[SESSION_UID_KEY] = user.uid
    return _to_dashboard()


@router.post("/logout")
async def logout(
    request: Request,
    session_id: str = Depends(get_session_id),
    session: AuthSession = Depends(get_auth_session),
    services: ServiceManager = Depends(get_service_manager)
):
    await services.auth_service.log_out(session)
    services.sessions.drop(session_id)
    request.session.pop(SESSION_UID_KEY, None)
    return RedirectResponse(url="/login", status_code=303)


# ===== DASHBOARD =====

@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard_page(
    request: Request,
    dashboard: Dashboard = Depends(get_dashboard),
    settings: DashboardSettings = Depends(get_app_settings)
):
    """Unfinished and completed tasks with the task dialog"""
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "title": settings.APP_NAME,
            "user": dashboard.session.current_user,
            "uncompleted_tasks": dashboard.uncompleted_tasks,
            "completed_tasks": dashboard.completed_tasks,
            "dialog": dashboard.dialog.state,
            "format_deadline": lambda deadline: format_deadline(deadline, settings.tzinfo)
        }
    )


@router.post("/dashboard/tasks/add")
async def add_task(dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.dialog.open_for_add()
    return _to_dashboard()


@router.post("/dashboard/tasks/{task_id}/edit")
async def edit_task(task_id: str, dashboard: Dashboard = Depends(get_dashboard)):
    if dashboard.session.is_authenticated:
        dashboard.dialog.open_for_edit(find_task_or_404(dashboard, task_id))
    return _to_dashboard()


@router.post("/dashboard/dialog/close")
async def close_dialog(
    title: str = Form(""),
    description: str = Form(""),
    date: str = Form(""),
    time: str = Form(""),
    dashboard: Dashboard = Depends(get_dashboard)
):
    """Cancel keeps what was typed in the form"""
    _apply_form(dashboard, {"title": title, "description": description, "date": date, "time": time})
    dashboard.dialog.close()
    return _to_dashboard()


@router.post("/dashboard/dialog/submit")
async def submit_dialog(
    title: str = Form(""),
    description: str = Form(""),
    date: str = Form(""),
    time: str = Form(""),
    dashboard: Dashboard = Depends(get_dashboard)
):
    _apply_form(dashboard, {"title": title, "description": description, "date": date, "time": time})
    await dashboard.dialog.submit()
    return _to_dashboard()


@router.post("/dashboard/tasks/{task_id}/toggle")
async def toggle_task(task_id: str, dashboard: Dashboard = Depends(get_dashboard)):
    try:
        await dashboard.task_service.toggle_completion(task_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return _to_dashboard()


@router.post("/dashboard/tasks/{task_id}/delete")
async def delete_task(task_id: str, dashboard: Dashboard = Depends(get_dashboard)):
    await dashboard.task_service.delete(task_id)
    return _to_dashboard()


@router.post("/dashboard/tasks/{task_id}/duplicate")
async def duplicate_task(task_id: str, dashboard: Dashboard = Depends(get_dashboard)):
    if dashboard.session.is_authenticated:
        await dashboard.task_service.duplicate(find_task_or_404(dashboard, task_id))
    return _to_dashboard()
