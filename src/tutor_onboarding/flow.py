"""OnboardingFlow: top-level controller from the welcome screen to completion.

State overview:
    welcome        no role, no wizard session
    student        StudentWizard running
    teacher        TeacherWizard running
    confirmation   wizard on its terminal slot; profile and summary available
    done           completion callback fired; terminal

The flow owns at most one wizard at a time.  Starting a role always creates
a fresh wizard, and ``back_to_welcome()`` discards it, so nothing survives a
return to the welcome screen.
"""

from __future__ import annotations

import logging
from typing import Callable

from tutor_onboarding.aggregator import build_profile, build_summary
from tutor_onboarding.catalog import CatalogStore, get_default_store
from tutor_onboarding.engine import WizardEngine
from tutor_onboarding.models.enums import FlowState, Role
from tutor_onboarding.models.session import ConfirmationSummary, NavigationResult, ProfileDraft
from tutor_onboarding.wizards import wizard_for_role

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[Role, ProfileDraft], None]

_WIZARD_STATES = (FlowState.STUDENT, FlowState.TEACHER)


class OnboardingFlow:
    """Drives welcome -> role wizard -> confirmation -> done.

    Args:
        on_complete: called with ``(role, profile)`` exactly once, from
                     :meth:`confirm`; its return value is ignored
        store: catalog store to build wizards from (default store if None)
    """

    def __init__(
        self,
        on_complete: CompletionCallback | None = None,
        *,
        store: CatalogStore | None = None,
    ) -> None:
        self._store = store or get_default_store()
        self._on_complete = on_complete
        self._state = FlowState.WELCOME
        self._wizard: WizardEngine | None = None
        self._profile: ProfileDraft | None = None

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def role(self) -> Role | None:
        return self._wizard.role if self._wizard is not None else None

    @property
    def wizard(self) -> WizardEngine:
        """The running wizard; field writes go through it directly."""
        if self._wizard is None:
            raise ValueError(f"no wizard in state '{self._state.value}'")
        return self._wizard

    def _require(self, operation: str, *states: FlowState) -> None:
        if self._state not in states:
            raise ValueError(f"{operation}() is not allowed in state '{self._state.value}'")

    # ------------------------------------------------------------------
    # Role entry
    # ------------------------------------------------------------------

    def start_student_flow(self) -> WizardEngine:
        return self._start(Role.STUDENT)

    def start_teacher_flow(self) -> WizardEngine:
        return self._start(Role.TEACHER)

    def _start(self, role: Role) -> WizardEngine:
        if self._state == FlowState.DONE:
            raise ValueError(f"cannot start a {role.value} flow in state 'done'")
        self._wizard = wizard_for_role(role, self._store)
        self._profile = None
        self._state = FlowState(role.value)
        logger.info("Onboarding started as %s", role.value)
        return self._wizard

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def advance(self) -> NavigationResult:
        """Advance the wizard; moves to ``confirmation`` on its terminal slot."""
        self._require("advance", *_WIZARD_STATES)
        result = self.wizard.advance()
        if self.wizard.is_complete():
            self._state = FlowState.CONFIRMATION
            logger.info("%s wizard reached confirmation", self.wizard.role.value)
        return result

    def retreat(self) -> NavigationResult:
        """Retreat the wizard; from ``confirmation`` back to the last data slot."""
        self._require("retreat", FlowState.CONFIRMATION, *_WIZARD_STATES)
        result = self.wizard.retreat()
        if self._state == FlowState.CONFIRMATION:
            self._state = FlowState(self.wizard.role.value)
        return result

    def back_to_welcome(self) -> None:
        """Discard the role, the branch and every answer."""
        self._require("back_to_welcome", FlowState.WELCOME, FlowState.CONFIRMATION, *_WIZARD_STATES)
        if self._wizard is not None:
            logger.info("Onboarding reset from %s", self._state.value)
        self._wizard = None
        self._profile = None
        self._state = FlowState.WELCOME

    # ------------------------------------------------------------------
    # Confirmation
    # ------------------------------------------------------------------

    def profile(self) -> ProfileDraft:
        """The aggregated profile for the finished wizard.

        Raises ``ValueError`` if the wizard was moved off its terminal slot
        through :attr:`wizard` after the flow reached confirmation.
        """
        self._require("profile", FlowState.CONFIRMATION, FlowState.DONE)
        if self._profile is not None:
            return self._profile
        w = self.wizard
        if not w.is_complete():
            raise ValueError(
                f"{w.role.value} wizard left confirmation (slot {w.step_index} "
                f"of {w.total_steps}); advance it back before confirming"
            )
        d = w.discriminator
        return build_profile(w.role, d, w.answers, field_keys=w.catalog.field_keys(d))

    def summary(self) -> ConfirmationSummary:
        self._require("summary", FlowState.CONFIRMATION)
        return build_summary(self.wizard.catalog, self.profile())

    def confirm(self) -> ProfileDraft:
        """Hand the profile to ``on_complete`` and finish the flow.

        If the callback raises, the flow stays in ``confirmation`` and the
        exception propagates.
        """
        self._require("confirm", FlowState.CONFIRMATION)
        profile = self.profile()
        if self._on_complete is not None:
            self._on_complete(profile.role, profile)
        self._profile = profile
        self._wizard = None
        self._state = FlowState.DONE
        logger.info(
            "Onboarding completed as %s (%s=%s, %d fields)",
            profile.role.value, profile.discriminator_field, profile.discriminator,
            len(profile.keys()),
        )
        return profile
