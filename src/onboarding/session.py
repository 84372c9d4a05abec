"""
Onboarding Session.

One wizard run: the step machine, the form being filled in, and the gateway
calls made at the two write points (after the name, after the files).

Gateway calls are best-effort. Their result lands in `outcomes` and in the
log, never in the caller's control flow: the wizard always moves on.
"""

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Awaitable, Literal

from .gateway import GatewayError, SubmissionGateway
from .state import InvalidTransition, OnboardingForm, OnboardingStep, StepMachine
from .store import StepStore

logger = logging.getLogger(__name__)


OutcomeKind = Literal["partial", "final", "upload", "delete"]


def _utc_now() -> str:
    """Get current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


@dataclass
class SubmissionOutcome:
    """Result of one gateway call."""
    kind: OutcomeKind
    ok: bool
    error: str | None = None
    at: str = field(default_factory=_utc_now)


class OnboardingSession:
    """
    A single wizard session.

    Created on every page load: the step comes back from the store, the
    form starts empty.
    """

    def __init__(
        self,
        store: StepStore,
        gateway: SubmissionGateway,
        session_id: str | None = None,
        correlate: bool = False,
        delete_removed_files: bool = False,
    ):
        self.session_id = session_id or uuid.uuid4().hex
        self.machine = StepMachine(store)
        self.form = OnboardingForm()
        self.gateway = gateway
        self.correlate = correlate
        self.delete_removed_files = delete_removed_files
        self.outcomes: list[SubmissionOutcome] = []

    @classmethod
    def open(cls, store: StepStore, gateway: SubmissionGateway, **kwargs) -> "OnboardingSession":
        """Create a session and restore its step from the store."""
        session = cls(store, gateway, **kwargs)
        session.machine.restore()
        return session

    @property
    def step(self) -> OnboardingStep:
        return self.machine.current_step

    @property
    def _correlation_id(self) -> str | None:
        return self.session_id if self.correlate else None

    def rebind(self, store: StepStore) -> None:
        """Point the machine at the store for the current request."""
        self.machine.store = store

    def _require_at(self, step: OnboardingStep) -> None:
        """Fail before any side effect unless the session is at `step`."""
        if self.step != step:
            raise InvalidTransition(self.step, step)

    async def _best_effort(self, kind: OutcomeKind, call: Awaitable[Any]) -> Any:
        """Await a gateway call, record the outcome, swallow gateway errors."""
        try:
            result = await call
        except GatewayError as e:
            logger.error(f"[{self.session_id}] {kind} submission failed: {e}")
            self.outcomes.append(SubmissionOutcome(kind=kind, ok=False, error=str(e)))
            return None

        logger.info(f"[{self.session_id}] {kind} submission ok")
        self.outcomes.append(SubmissionOutcome(kind=kind, ok=True))
        return result

    # =========================================================================
    # Steps
    # =========================================================================

    def start(self) -> OnboardingStep:
        """Welcome -> name."""
        self._require_at(OnboardingStep.WELCOME)
        return self.machine.transition(OnboardingStep.NAME)

    async def submit_name(self, name: str) -> OnboardingStep:
        """
        Store the name, send the partial record, advance to the request step.

        Only accepted at the name step, so the partial write goes out once
        per session. Its failure does not block the transition.
        """
        self._require_at(OnboardingStep.NAME)
        self.form.name = name
        await self._best_effort(
            "partial",
            self.gateway.submit_partial(name, session_id=self._correlation_id),
        )

        return self.machine.transition(OnboardingStep.REQUEST)

    def submit_request(self, request: str) -> OnboardingStep:
        """Store the request text, advance to the files step."""
        self._require_at(OnboardingStep.REQUEST)
        self.form.request = request
        return self.machine.transition(OnboardingStep.FILES)

    async def add_file(
        self,
        content: bytes,
        filename: str,
        content_type: str | None = None,
    ) -> str | None:
        """Upload a file. Returns its URL, or None if the upload failed."""
        self._require_at(OnboardingStep.FILES)
        url = await self._best_effort(
            "upload",
            self.gateway.upload_file(content, filename, content_type),
        )
        if url:
            self.form.add_file(url)
        return url

    async def remove_file(self, url: str, delete_remote: bool | None = None) -> bool:
        """
        Drop one matching URL from the file list.

        The stored blob is only deleted when asked (or when the session was
        created with delete_removed_files).
        """
        self._require_at(OnboardingStep.FILES)
        removed = self.form.remove_file(url)
        if delete_remote is None:
            delete_remote = self.delete_removed_files
        if removed and delete_remote:
            await self._best_effort("delete", self.gateway.remove_file(url))
        return removed

    async def finish(self) -> OnboardingStep:
        """
        Send the final record if the form is complete, then move to thanks.

        An incomplete form skips the write silently; the transition happens
        either way.
        """
        self._require_at(OnboardingStep.FILES)
        if self.form.is_complete():
            await self._best_effort(
                "final",
                self.gateway.submit_final(self.form, session_id=self._correlation_id),
            )
        else:
            logger.info(f"[{self.session_id}] Form incomplete, skipping final submission")

        return self.machine.transition(OnboardingStep.THANKS)

    # =========================================================================
    # Views
    # =========================================================================

    def view(self) -> dict[str, Any]:
        """Plain snapshot of the session for rendering or JSON."""
        return {
            "session_id": self.session_id,
            "step": self.step.value,
            "steps_completed": [s.value for s in self.machine.completed_steps()],
            "name": self.form.name,
            "request": self.form.request,
            "files": list(self.form.files),
        }


class SessionRegistry:
    """
    Live sessions in this process, keyed by session id.

    Note: in-memory only, so sessions do not survive a restart (the step
    cookie does). Once `max_sessions` is reached the least recently used
    session is dropped.
    """

    def __init__(self, max_sessions: int = 1000) -> None:
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be at least 1, got {max_sessions}")
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, OnboardingSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def add(self, session: OnboardingSession) -> OnboardingSession:
        self._sessions.pop(session.session_id, None)
        while len(self._sessions) >= self.max_sessions:
            self._sessions.popitem(last=False)
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str | None) -> OnboardingSession | None:
        if not session_id:
            return None
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def clear(self) -> None:
        self._sessions.clear()
