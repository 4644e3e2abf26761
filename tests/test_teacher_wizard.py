"""TeacherWizard walkthroughs for the three teaching focuses.

Scenario B (igcse) checks rate gating and the seven-key payload; the
``both`` focus needs a language and a subject before leaving slot 1.
"""

import pytest

from helpers.walk import (
    TEACHER_BOTH,
    TEACHER_IGCSE,
    TEACHER_LANGUAGES,
    fill_step,
    walk_to_confirmation,
)
from tutor_onboarding.aggregator import build_profile


def _profile(wizard):
    d = wizard.discriminator
    return build_profile(wizard.role, d, wizard.answers, field_keys=wizard.catalog.field_keys(d))


class TestScenarioB:
    def test_rate_gates_final_advance(self, teacher):
        """advance() on the rate step succeeds only once ratePreference is set."""
        teacher.choose_focus("igcse")
        teacher.advance()
        for values in TEACHER_IGCSE[:5]:
            fill_step(teacher, values)
            assert teacher.advance().ok
        assert teacher.step_index == 6

        blocked = teacher.advance()
        assert blocked.outcome == "blocked"
        assert blocked.missing == ["ratePreference"]
        assert teacher.step_index == 6

        teacher.set_rate_range("15", "30")
        done = teacher.advance()
        assert done.outcome == "completed"
        assert teacher.is_complete()

    def test_igcse_payload(self, teacher):
        """All six answers plus teachingFocus land in the payload."""
        walk_to_confirmation(teacher, "igcse", TEACHER_IGCSE)
        assert _profile(teacher).as_dict() == {
            "teachingFocus": "igcse",
            "subjectSpecialization": ["Mathematics"],
            "teachingLevel": ["Beginner", "Advanced"],
            "teachingStyle": "exam-oriented",
            "lessonFormat": ["group-classes"],
            "schedule": "flexible",
            "ratePreference": "15-30",
        }


class TestLanguagesFocus:
    def test_languages_payload(self, teacher):
        """Languages focus writes teachingApproach and availability."""
        walk_to_confirmation(teacher, "languages", TEACHER_LANGUAGES)
        payload = _profile(teacher).as_dict()
        assert payload["teachingApproach"] == "conversational"
        assert payload["availability"] == "weekends"
        assert payload["languageSpecialization"] == ["english", "spanish"]
        assert "schedule" not in payload
        assert "teachingStyle" not in payload

    def test_confirmation_text(self, teacher):
        """Languages focus confirms with the 'saved' headline."""
        walk_to_confirmation(teacher, "languages", TEACHER_LANGUAGES)
        step = teacher.current_definition()
        assert step.description == "Excellent! Your teaching preferences have been saved."


class TestBothFocus:
    @pytest.fixture
    def on_slot_one(self, teacher):
        teacher.choose_focus("both")
        teacher.advance()
        return teacher

    def test_languages_only_blocks(self, on_slot_one):
        """A language without a subject is not enough."""
        on_slot_one.toggle_in_set("languageSpecialization", "french")
        result = on_slot_one.advance()
        assert result.outcome == "blocked"
        assert result.missing == ["subjectSpecialization"]

    def test_subjects_only_blocks(self, on_slot_one):
        """A subject without a language is not enough."""
        on_slot_one.toggle_in_set("subjectSpecialization", "History")
        assert on_slot_one.advance().missing == ["languageSpecialization"]

    def test_nothing_selected_lists_both(self, on_slot_one):
        """With neither list filled both keys are reported."""
        assert on_slot_one.advance().missing == ["languageSpecialization", "subjectSpecialization"]

    def test_both_lists_advance(self, on_slot_one):
        """One pick in each list unlocks slot 2."""
        fill_step(on_slot_one, TEACHER_BOTH[0])
        assert on_slot_one.advance().outcome == "advanced"
        assert on_slot_one.current_definition().title == "Teaching Level"

    def test_both_payload(self, teacher):
        """Both focus keeps both specialization lists."""
        walk_to_confirmation(teacher, "both", TEACHER_BOTH)
        payload = _profile(teacher).as_dict()
        assert payload["languageSpecialization"] == ["french"]
        assert payload["subjectSpecialization"] == ["French", "History"]
        assert payload["availability"] == "both"
        assert len(payload) == 8


class TestMultiSelectSlots:
    @pytest.mark.parametrize("slot", [2, 4])
    def test_empty_multi_select_blocks(self, teacher, slot):
        """teachingLevel and lessonFormat each need at least one pick."""
        teacher.choose_focus("languages")
        teacher.advance()
        for values in TEACHER_LANGUAGES[: slot - 1]:
            fill_step(teacher, values)
            teacher.advance()
        assert teacher.step_index == slot
        result = teacher.advance()
        assert result.outcome == "blocked"
        assert teacher.step_index == slot
