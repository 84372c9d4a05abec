"""
Onboarding API Endpoints.

Server-rendered wizard. Every endpoint returns the HTML screen for the step
the session ends up on. The current step rides along in a cookie so a reload
resumes where the visitor left off; the form itself lives in memory.
"""

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, Response, UploadFile
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from intake.config import get_settings

from .gateway import SubmissionGateway
from .screens import render, render_page
from .session import OnboardingSession, SessionRegistry
from .state import InvalidTransition
from .store import CookieStepStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/onboarding", tags=["onboarding"])

# In-memory session store (keyed by session id)
sessions = SessionRegistry()


# =============================================================================
# Dependencies
# =============================================================================


def get_sessions() -> SessionRegistry:
    return sessions


@lru_cache
def get_gateway() -> SubmissionGateway:
    return SubmissionGateway.from_settings()


def get_step_store(request: Request, response: Response) -> CookieStepStore:
    """Cookie-backed step store for this request."""
    settings = get_settings()
    return CookieStepStore(
        request,
        response,
        key=settings.step_cookie_name,
        max_age=settings.step_cookie_max_age,
    )


# =============================================================================
# Response Models
# =============================================================================


class StateResponse(BaseModel):
    """Current wizard state."""
    session_id: str
    step: str
    steps_completed: list[str]
    name: str
    request: str
    files: list[str]


# =============================================================================
# Session Helpers
# =============================================================================


def open_session(
    store: CookieStepStore,
    gateway: SubmissionGateway,
    registry: SessionRegistry,
) -> OnboardingSession:
    """New session with the step restored from the cookie and an empty form."""
    settings = get_settings()
    session = OnboardingSession.open(
        store,
        gateway,
        correlate=settings.correlate_submissions,
        delete_removed_files=settings.delete_removed_files,
    )
    logger.info(f"Opened onboarding session {session.session_id} at step '{session.step.value}'")
    return registry.add(session)


def resume_session(
    session_id: str | None,
    store: CookieStepStore,
    gateway: SubmissionGateway,
    registry: SessionRegistry,
) -> OnboardingSession:
    """
    Look up the session a form post belongs to.

    Unknown ids (server restart, evicted) get a fresh session, same as a reload.
    """
    session = registry.get(session_id)
    if session is None:
        if session_id:
            logger.info(f"Unknown onboarding session {session_id}, starting a new one")
        return open_session(store, gateway, registry)

    session.rebind(store)
    return session


def page(session: OnboardingSession) -> str:
    settings = get_settings()
    screen = render(session.step, session.form, home_url=settings.home_url)
    return render_page(screen, session.session_id)


def conflict(e: InvalidTransition) -> HTTPException:
    logger.warning(f"Rejected step change: {e}")
    return HTTPException(status_code=409, detail=str(e))


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_class=HTMLResponse)
async def show_wizard(
    store: CookieStepStore = Depends(get_step_store),
    gateway: SubmissionGateway = Depends(get_gateway),
    registry: SessionRegistry = Depends(get_sessions),
) -> str:
    """Page load: fresh session, step from the cookie."""
    session = open_session(store, gateway, registry)
    return page(session)


@router.post("/start", response_class=HTMLResponse)
async def start(
    session_id: str = Form(""),
    store: CookieStepStore = Depends(get_step_store),
    gateway: SubmissionGateway = Depends(get_gateway),
    registry: SessionRegistry = Depends(get_sessions),
) -> str:
    """Welcome -> name."""
    session = resume_session(session_id, store, gateway, registry)
    try:
        session.start()
    except InvalidTransition as e:
        raise conflict(e)
    return page(session)


@router.post("/name", response_class=HTMLResponse)
async def submit_name(
    session_id: str = Form(""),
    name: str = Form(""),
    store: CookieStepStore = Depends(get_step_store),
    gateway: SubmissionGateway = Depends(get_gateway),
    registry: SessionRegistry = Depends(get_sessions),
) -> str:
    """Save the name (partial record) and move to the request step."""
    session = resume_session(session_id, store, gateway, registry)
    try:
        await session.submit_name(name.strip())
    except InvalidTransition as e:
        raise conflict(e)
    return page(session)


@router.post("/request", response_class=HTMLResponse)
async def submit_request(
    session_id: str = Form(""),
    request: str = Form(""),
    store: CookieStepStore = Depends(get_step_store),
    gateway: SubmissionGateway = Depends(get_gateway),
    registry: SessionRegistry = Depends(get_sessions),
) -> str:
    """Save the request text and move to the files step."""
    session = resume_session(session_id, store, gateway, registry)
    if not request.strip():
        # Nothing to send yet - show the request screen again
        return page(session)

    try:
        session.submit_request(request)
    except InvalidTransition as e:
        raise conflict(e)
    return page(session)


@router.post("/files", response_class=HTMLResponse)
async def upload_file(
    session_id: str = Form(""),
    upload: UploadFile | None = File(None),
    store: CookieStepStore = Depends(get_step_store),
    gateway: SubmissionGateway = Depends(get_gateway),
    registry: SessionRegistry = Depends(get_sessions),
) -> str:
    """Upload one file and add its URL to the list."""
    session = resume_session(session_id, store, gateway, registry)
    if upload is None or not upload.filename:
        return page(session)

    content = await upload.read()
    try:
        await session.add_file(content, upload.filename, upload.content_type)
    except InvalidTransition as e:
        raise conflict(e)
    return page(session)


@router.post("/files/remove", response_class=HTMLResponse)
async def remove_file(
    session_id: str = Form(""),
    url: str = Form(...),
    store: CookieStepStore = Depends(get_step_store),
    gateway: SubmissionGateway = Depends(get_gateway),
    registry: SessionRegistry = Depends(get_sessions),
) -> str:
    """Drop one file from the list."""
    session = resume_session(session_id, store, gateway, registry)
    try:
        await session.remove_file(url)
    except InvalidTransition as e:
        raise conflict(e)
    return page(session)


@router.post("/finish", response_class=HTMLResponse)
async def finish(
    session_id: str = Form(""),
    store: CookieStepStore = Depends(get_step_store),
    gateway: SubmissionGateway = Depends(get_gateway),
    registry: SessionRegistry = Depends(get_sessions),
) -> str:
    """Send the final record (if complete) and show the thank-you screen."""
    session = resume_session(session_id, store, gateway, registry)
    try:
        await session.finish()
    except InvalidTransition as e:
        raise conflict(e)

    registry.discard(session.session_id)
    return page(session)


@router.get("/state", response_model=StateResponse)
async def get_state(
    session_id: str,
    registry: SessionRegistry = Depends(get_sessions),
) -> StateResponse:
    """Current step and form data for a live session."""
    session = registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return StateResponse(**session.view())
