"""Answer tables and drivers shared by the wizard and flow tests."""

from typing import Any, Dict, List

from tutor_onboarding.engine import WizardEngine

# One dict per data slot (1 .. N-1); the branch value is set on slot 0.
STUDENT_LANGUAGES: List[Dict[str, Any]] = [
    {"languages": ["spanish", "french"]},
    {"currentLevel": "beginner"},
    {"learningObjective": "communicate"},
    {"classPreference": "private"},
    {"timeAvailability": "weekends"},
]

STUDENT_IGCSE: List[Dict[str, Any]] = [
    {"igcseSubjects": ["Mathematics", "Physics", "Chemistry"]},
    {"currentGrade": "year10"},
    {"learningObjective": "past-papers"},
    {"studyFrequency": "daily"},
    {"studyFrequency": "once"},
]

TEACHER_IGCSE: List[Dict[str, Any]] = [
    {"subjectSpecialization": ["Mathematics"]},
    {"teachingLevel": ["Beginner", "Advanced"]},
    {"teachingStyle": "exam-oriented"},
    {"lessonFormat": ["group-classes"]},
    {"schedule": "flexible"},
    {"ratePreference": "15-30"},
]

TEACHER_LANGUAGES: List[Dict[str, Any]] = [
    {"languageSpecialization": ["english", "spanish"]},
    {"teachingLevel": ["Intermediate"]},
    {"teachingApproach": "conversational"},
    {"lessonFormat": ["live-one-on-one", "recorded-video"]},
    {"availability": "weekends"},
    {"ratePreference": "20-40"},
]

TEACHER_BOTH: List[Dict[str, Any]] = [
    {"languageSpecialization": ["french"], "subjectSpecialization": ["French", "History"]},
    {"teachingLevel": ["Beginner", "Intermediate", "Advanced"]},
    {"teachingApproach": "structured"},
    {"lessonFormat": ["group-classes"]},
    {"availability": "both"},
    {"ratePreference": "25-50"},
]

BRANCHES = {
    ("student", "languages"): STUDENT_LANGUAGES,
    ("student", "igcse"): STUDENT_IGCSE,
    ("teacher", "languages"): TEACHER_LANGUAGES,
    ("teacher", "igcse"): TEACHER_IGCSE,
    ("teacher", "both"): TEACHER_BOTH,
}


def fill_step(wizard: WizardEngine, values: Dict[str, Any]) -> None:
    """Write ``values`` on the active step; lists go in through toggles."""
    for key, value in values.items():
        if isinstance(value, list):
            for token in value:
                wizard.toggle_in_set(key, token)
        else:
            wizard.set_field(key, value)


def walk_to_confirmation(wizard: WizardEngine, path: str, slots: List[Dict[str, Any]]) -> None:
    """Pick ``path`` on slot 0 and answer every data slot, ending on confirmation."""
    assert wizard.set_discriminator(path), "discriminator rejected on slot 0"
    result = wizard.advance()
    assert result.ok, f"slot 0 blocked: {result.missing}"
    for values in slots:
        fill_step(wizard, values)
        result = wizard.advance()
        assert result.ok, f"slot {wizard.step_index} blocked: {result.missing}"
    assert wizard.is_complete(), f"stopped at slot {wizard.step_index}, not confirmation"
