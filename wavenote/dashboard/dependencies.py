#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
WaveNote - Dashboard Dependencies
Providers for FastAPI routes: services, browser session, auth state and dashboard
"""

import logging

from fastapi import Depends, HTTPException, Request, status

from wavenote.config import DashboardSettings, get_settings
from wavenote.models.task import Task
from wavenote.services import AuthService, AuthSession, Dashboard, ServiceManager

logger = logging.getLogger(__name__)

SESSION_ID_KEY = "sid"
SESSION_UID_KEY = "uid"


# ===== SERVICES =====

def get_service_manager(request: Request) -> ServiceManager:
    services = getattr(request.app.state, "services", None)
    if services is None or not services.initialized:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Services are not initialized")
    return services


def get_auth_service(services: ServiceManager = Depends(get_service_manager)) -> AuthService:
    return services.auth_service


def get_app_settings(request: Request) -> DashboardSettings:
    return getattr(request.app.state, "settings", None) or get_settings()


# ===== BROWSER SESSION =====

def get_session_id(request: Request, services: ServiceManager = Depends(get_service_manager)) -> str:
    """Id of the browser session, kept in the signed session cookie"""
    session_id = request.session.get(SESSION_ID_KEY)
    if not session_id:
        session_id = services.sessions.new_session_id()
        request.session[SESSION_ID_KEY] = session_id
    return session_id


async def get_auth_session(
    request: Request,
    session_id: str = Depends(get_session_id),
    services: ServiceManager = Depends(get_service_manager)
) -> AuthSession:
    """Auth state of the browser session, restored from the cookie after a restart"""
    session = services.sessions.get_session(session_id)
    uid = request.session.get(SESSION_UID_KEY)
    if uid and not session.is_authenticated:
        user = await services.auth_service.restore_session(session, uid)
        if user is None:
            request.session.pop(SESSION_UID_KEY, None)
        else:
            logger.debug(f"Session {session_id} restored for {user.email}")
    return session


async def get_dashboard(
    session_id: str = Depends(get_session_id),
    session: AuthSession = Depends(get_auth_session),
    services: ServiceManager = Depends(get_service_manager)
) -> Dashboard:
    return await services.sessions.get_dashboard(session_id)


def find_task_or_404(dashboard: Dashboard, task_id: str) -> Task:
    task = dashboard.task_service.find_task(task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Task {task_id} not found")
    return task
