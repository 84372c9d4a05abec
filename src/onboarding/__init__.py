"""
Project Onboarding Wizard.

Walks a visitor through a fixed sequence of screens and collects what they
want built:

1. Welcome
2. Name      - partial record written to Supabase
3. Request   - free-text description of the project
4. Files     - uploads to Supabase storage, final record written
5. Thanks    - terminal; the persisted step is cleared

Only the current step is persisted (browser cookie). Form data is held in
memory for one wizard session.
"""

from .state import (
    InvalidTransition,
    OnboardingForm,
    OnboardingStep,
    ProjectRecord,
    StepMachine,
)
from .session import OnboardingSession, SessionRegistry

__all__ = [
    "InvalidTransition",
    "OnboardingForm",
    "OnboardingStep",
    "OnboardingSession",
    "ProjectRecord",
    "SessionRegistry",
    "StepMachine",
]
