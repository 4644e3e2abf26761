"""Public model re-exports for tutor_onboarding.

Consumers should import from ``tutor_onboarding.models`` rather than
reaching into sub-modules directly.
"""

# --- Enums ---
from tutor_onboarding.models.enums import FlowState, Role

# --- Step table ---
from tutor_onboarding.models.step import (
    InputKind,
    Option,
    StepDefinition,
    StepField,
    StepKind,
)
from tutor_onboarding.models.catalog import RoleCatalogFile

# --- Session / results ---
from tutor_onboarding.models.session import (
    AnswerDraft,
    AnswerValue,
    ConfirmationSummary,
    FieldPayload,
    NavigationResult,
    ProfileDraft,
    ProgressItem,
    StepView,
    SummaryBadgeGroup,
    WizardSession,
)

__all__ = [
    "FlowState",
    "Role",
    "InputKind",
    "Option",
    "StepDefinition",
    "StepField",
    "StepKind",
    "RoleCatalogFile",
    "AnswerDraft",
    "AnswerValue",
    "ConfirmationSummary",
    "FieldPayload",
    "NavigationResult",
    "ProfileDraft",
    "ProgressItem",
    "StepView",
    "SummaryBadgeGroup",
    "WizardSession",
]
