"""
Onboarding State Management.

Defines the wizard steps, the form collected along the way, and the step
machine that keeps the current step in sync with the persisted step store.

Only the step is persisted (so a reload resumes at the right screen).
Form data lives in memory for the lifetime of one wizard session.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel

from .store import StepStore

logger = logging.getLogger(__name__)


class OnboardingStep(str, Enum):
    """Wizard steps, in order."""
    WELCOME = "welcome"
    NAME = "name"
    REQUEST = "request"
    FILES = "files"
    THANKS = "thanks"    # Terminal


STEP_ORDER: list[OnboardingStep] = list(OnboardingStep)

INITIAL_STEP = OnboardingStep.WELCOME
TERMINAL_STEP = OnboardingStep.THANKS


class InvalidTransition(Exception):
    """Raised when a step change skips ahead, goes back, or leaves the terminal step."""

    def __init__(self, current: OnboardingStep, target: OnboardingStep | None):
        self.current = current
        self.target = target
        target_label = target.value if target else "<none>"
        super().__init__(f"Cannot move from '{current.value}' to '{target_label}'")


def resolve_step(raw: str | None) -> OnboardingStep:
    """
    Map a stored value to a step.

    Anything missing or unrecognized resolves to the initial step.
    """
    if not raw:
        return INITIAL_STEP
    try:
        return OnboardingStep(raw)
    except ValueError:
        return INITIAL_STEP


def next_step(step: OnboardingStep) -> OnboardingStep | None:
    """Return the step after `step`, or None for the terminal step."""
    idx = STEP_ORDER.index(step)
    if idx + 1 >= len(STEP_ORDER):
        return None
    return STEP_ORDER[idx + 1]


@dataclass
class OnboardingForm:
    """Data collected by the wizard. Never persisted locally."""
    name: str = ""
    request: str = ""
    files: list[str] = field(default_factory=list)  # Public URLs

    def add_file(self, url: str) -> None:
        self.files.append(url)

    def remove_file(self, url: str) -> bool:
        """
        Remove the first entry equal to `url`.

        Other entries keep their order. Returns False if nothing matched.
        Only edits the list; the stored blob is left alone.
        """
        try:
            self.files.remove(url)
        except ValueError:
            return False
        return True

    def is_complete(self) -> bool:
        """True when name, request and at least one file are present."""
        return bool(self.name) and bool(self.request) and len(self.files) > 0


class ProjectRecord(BaseModel):
    """
    Row written to the projects collection.

    The partial write only carries `name`; the final write carries all three.
    `session_id` is only set when submissions are correlated.
    """
    name: str
    request: str | None = None
    files: list[str] | None = None
    session_id: str | None = None

    @classmethod
    def partial(cls, name: str, session_id: str | None = None) -> "ProjectRecord":
        return cls(name=name, session_id=session_id)

    @classmethod
    def final(cls, form: OnboardingForm, session_id: str | None = None) -> "ProjectRecord":
        return cls(
            name=form.name,
            request=form.request,
            files=list(form.files),
            session_id=session_id,
        )

    def to_row(self) -> dict:
        """Serialize for insert, leaving out unset fields."""
        return self.model_dump(exclude_none=True)


class StepMachine:
    """
    Current wizard step, mirrored into a StepStore.

    Moves are forward-only: a transition must target the current step or
    its immediate successor. Entering the terminal step clears the store so
    the next visit starts over.
    """

    def __init__(self, store: StepStore):
        self.store = store
        self._step = INITIAL_STEP

    @property
    def current_step(self) -> OnboardingStep:
        return self._step

    def restore(self) -> OnboardingStep:
        """
        Load the step from the store.

        Missing or unrecognized values are replaced with the initial step,
        which is written back.
        """
        raw = self.store.get()
        step = resolve_step(raw)
        if step == TERMINAL_STEP:
            self.store.clear()
        elif raw != step.value:
            if raw:
                logger.warning(f"Ignoring unknown persisted step {raw!r}")
            self.store.set(step.value)
        self._step = step
        return step

    def can_transition(self, target: OnboardingStep) -> bool:
        return target == self._step or target == next_step(self._step)

    def transition(self, target: OnboardingStep) -> OnboardingStep:
        """Move to `target` and persist it."""
        if not self.can_transition(target):
            raise InvalidTransition(self._step, target)

        self._step = target
        if target == TERMINAL_STEP:
            self.store.clear()
        else:
            self.store.set(target.value)
        return target

    def advance(self) -> OnboardingStep:
        """Move to the next step."""
        target = next_step(self._step)
        if target is None:
            raise InvalidTransition(self._step, None)
        return self.transition(target)

    def completed_steps(self) -> list[OnboardingStep]:
        """Steps strictly before the current one."""
        return STEP_ORDER[:STEP_ORDER.index(self._step)]
