"""OnboardingFlow state machine tests.

  | State          | Allowed                                                   |
  |----------------|-----------------------------------------------------------|
  | welcome        | start_*_flow, back_to_welcome                             |
  | student/teacher| advance, retreat, start_*_flow, back_to_welcome           |
  | confirmation   | profile, summary, confirm, retreat, back_to_welcome, start|
  | done           | profile (terminal)                                        |
"""

import pytest

from helpers.walk import (
    STUDENT_IGCSE,
    STUDENT_LANGUAGES,
    TEACHER_IGCSE,
    fill_step,
)
from tutor_onboarding.flow import OnboardingFlow
from tutor_onboarding.models.enums import FlowState, Role


class Recorder:
    """Completion callback that remembers every call."""

    def __init__(self):
        self.calls = []

    def __call__(self, role, profile):
        self.calls.append((role, profile))


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def flow(store, recorder):
    return OnboardingFlow(recorder, store=store)


def drive(flow, path, slots):
    """Answer every wizard step through the flow until confirmation."""
    flow.wizard.set_discriminator(path)
    flow.advance()
    for values in slots:
        fill_step(flow.wizard, values)
        result = flow.advance()
        assert result.ok, f"blocked: {result.missing}"


# =====================================================================
# Welcome and role entry
# =====================================================================


class TestWelcome:
    def test_starts_on_welcome(self, flow):
        """A new flow has no role and no wizard."""
        assert flow.state == FlowState.WELCOME
        assert flow.role is None
        with pytest.raises(ValueError):
            flow.wizard

    def test_start_student(self, flow):
        """start_student_flow enters the student wizard on slot 0."""
        wizard = flow.start_student_flow()
        assert flow.state == FlowState.STUDENT
        assert flow.role == Role.STUDENT
        assert wizard.step_index == 0
        assert wizard is flow.wizard

    def test_start_teacher(self, flow):
        """start_teacher_flow enters the teacher wizard."""
        flow.start_teacher_flow()
        assert flow.state == FlowState.TEACHER
        assert flow.wizard.discriminator_field == "teachingFocus"

    @pytest.mark.parametrize("op", ["advance", "retreat", "profile", "summary", "confirm"])
    def test_illegal_on_welcome(self, flow, op):
        """Wizard and confirmation operations need a running flow."""
        with pytest.raises(ValueError, match="welcome"):
            getattr(flow, op)()


# =====================================================================
# Wizard -> confirmation
# =====================================================================


class TestConfirmation:
    def test_reaches_confirmation(self, flow):
        """The terminal slot moves the flow to confirmation."""
        flow.start_student_flow()
        drive(flow, "languages", STUDENT_LANGUAGES)
        assert flow.state == FlowState.CONFIRMATION

    def test_blocked_advance_keeps_state(self, flow):
        """A blocked step leaves the flow in the wizard state."""
        flow.start_student_flow()
        result = flow.advance()
        assert result.outcome == "blocked"
        assert flow.state == FlowState.STUDENT

    def test_retreat_from_confirmation(self, flow):
        """Retreating from confirmation lands on the last data slot."""
        flow.start_teacher_flow()
        drive(flow, "igcse", TEACHER_IGCSE)
        result = flow.retreat()
        assert result.outcome == "retreated"
        assert flow.state == FlowState.TEACHER
        assert flow.wizard.step_index == 6
        assert flow.wizard.answers["ratePreference"] == "15-30"

    def test_advance_illegal_on_confirmation(self, flow):
        """advance() is not a confirmation operation; confirm() is."""
        flow.start_student_flow()
        drive(flow, "languages", STUDENT_LANGUAGES)
        with pytest.raises(ValueError, match="confirmation"):
            flow.advance()

    def test_summary(self, flow):
        """summary() resolves labels for the finished wizard."""
        flow.start_student_flow()
        drive(flow, "languages", STUDENT_LANGUAGES)
        summary = flow.summary()
        assert summary.path_label == "Languages"
        assert summary.groups[0].badges == ["Spanish", "French"]


# =====================================================================
# Completion
# =====================================================================


class TestCompletion:
    def test_confirm_fires_callback_once(self, flow, recorder):
        """confirm() hands (role, profile) to the callback exactly once."""
        flow.start_student_flow()
        drive(flow, "languages", STUDENT_LANGUAGES)
        profile = flow.confirm()

        assert flow.state == FlowState.DONE
        assert len(recorder.calls) == 1
        role, sent = recorder.calls[0]
        assert role == Role.STUDENT
        assert sent is profile
        assert sent.as_dict()["timeAvailability"] == "weekends"

    def test_done_is_terminal(self, flow, recorder):
        """After done, no further confirm or restart is possible."""
        flow.start_student_flow()
        drive(flow, "languages", STUDENT_LANGUAGES)
        flow.confirm()
        for op in (flow.confirm, flow.advance, flow.retreat, flow.back_to_welcome,
                   flow.start_student_flow, flow.start_teacher_flow):
            with pytest.raises(ValueError, match="done"):
                op()
        assert len(recorder.calls) == 1

    def test_profile_available_after_done(self, flow):
        """profile() still returns the confirmed payload in done."""
        flow.start_teacher_flow()
        drive(flow, "igcse", TEACHER_IGCSE)
        confirmed = flow.confirm()
        assert flow.profile() is confirmed

    def test_callback_failure_keeps_confirmation(self, store):
        """If the callback raises the flow can confirm again."""
        calls = []

        def flaky(role, profile):
            calls.append(role)
            if len(calls) == 1:
                raise RuntimeError("matching service down")

        flow = OnboardingFlow(flaky, store=store)
        flow.start_student_flow()
        drive(flow, "languages", STUDENT_LANGUAGES)
        with pytest.raises(RuntimeError):
            flow.confirm()
        assert flow.state == FlowState.CONFIRMATION
        flow.confirm()
        assert flow.state == FlowState.DONE
        assert len(calls) == 2

    def test_confirm_refused_after_wizard_left_terminal_slot(self, flow, recorder):
        """Stepping the wizard back directly blocks confirm() until it returns."""
        flow.start_student_flow()
        drive(flow, "languages", STUDENT_LANGUAGES)
        wizard = flow.wizard
        while wizard.step_index > 0:
            wizard.retreat()
        wizard.set_discriminator("igcse")

        with pytest.raises(ValueError, match="left confirmation"):
            flow.confirm()
        with pytest.raises(ValueError, match="left confirmation"):
            flow.summary()
        assert flow.state == FlowState.CONFIRMATION
        assert recorder.calls == [], "callback must not see an unvalidated profile"

        wizard.advance()
        for values in STUDENT_IGCSE:
            fill_step(wizard, values)
            assert wizard.advance().ok
        profile = flow.confirm()
        assert profile.discriminator == "igcse"
        assert profile.as_dict()["learningObjective"] == "past-papers"
        assert len(recorder.calls) == 1

    def test_no_callback(self, store):
        """on_complete is optional."""
        flow = OnboardingFlow(store=store)
        flow.start_student_flow()
        drive(flow, "languages", STUDENT_LANGUAGES)
        assert flow.confirm().role == Role.STUDENT


# =====================================================================
# Full wipe (P6)
# =====================================================================


class TestBackToWelcome:
    def test_wipe_from_confirmation(self, flow):
        """Back to welcome then re-entering gives an empty draft."""
        flow.start_student_flow()
        drive(flow, "languages", STUDENT_LANGUAGES)
        flow.back_to_welcome()
        assert flow.state == FlowState.WELCOME
        assert flow.role is None

        wizard = flow.start_student_flow()
        assert wizard.answers == {}
        assert wizard.discriminator is None
        assert wizard.step_index == 0

    def test_wipe_then_other_role(self, flow):
        """Switching role after a wipe starts the other wizard clean."""
        flow.start_student_flow()
        flow.wizard.set_discriminator("igcse")
        flow.back_to_welcome()
        wizard = flow.start_teacher_flow()
        assert wizard.role == Role.TEACHER
        assert wizard.answers == {}

    def test_restart_mid_wizard_discards_answers(self, flow):
        """Starting a role again replaces the running wizard."""
        first = flow.start_teacher_flow()
        first.set_discriminator("both")
        second = flow.start_teacher_flow()
        assert second is not first
        assert second.answers == {}
