"""Enumerations for onboarding roles and flow states."""

import enum


class Role(str, enum.Enum):
    """Marketplace role chosen on the welcome screen.

    Fixed for the lifetime of a wizard session; changing it means going back
    to the welcome screen, which discards the session.
    """

    STUDENT = "student"
    TEACHER = "teacher"


class FlowState(str, enum.Enum):
    """Top-level states of the onboarding flow.

    Transitions:
        welcome -> student | teacher   (role picked)
        student | teacher -> confirmation  (wizard reached its terminal slot)
        confirmation -> student | teacher  (retreat to the last data slot)
        confirmation -> welcome        (back to welcome, full wipe)
        confirmation -> done           (confirmed, completion callback fired)
    """

    WELCOME = "welcome"
    STUDENT = "student"
    TEACHER = "teacher"
    CONFIRMATION = "confirmation"
    DONE = "done"
