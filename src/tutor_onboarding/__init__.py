"""tutor_onboarding: role-based, branching onboarding wizard SDK.

Public API:
    OnboardingFlow  : top-level controller, welcome -> wizard -> confirmation -> done
    StudentWizard   : wizard branching on ``studyPath`` (languages | igcse)
    TeacherWizard   : wizard branching on ``teachingFocus`` (languages | igcse | both)
    WizardEngine    : generic, catalog-driven wizard driver both are built on
    CatalogStore    : loads the per-role YAML step tables into StepCatalogs
    StepCatalog     : (discriminator, slot) -> StepDefinition lookup for one role

Aggregation:
    build_profile   : freeze an answer draft into a ProfileDraft
    build_summary   : confirmation summary (labels, badges, rate) for a profile

Result models:
    NavigationResult, StepView, ProgressItem, ProfileDraft, ConfirmationSummary
"""

from tutor_onboarding.aggregator import build_profile, build_summary
from tutor_onboarding.catalog import CatalogStore, StepCatalog, get_default_store
from tutor_onboarding.engine import WizardEngine
from tutor_onboarding.flow import OnboardingFlow
from tutor_onboarding.models.enums import FlowState, Role
from tutor_onboarding.models.session import (
    ConfirmationSummary,
    NavigationResult,
    ProfileDraft,
    ProgressItem,
    StepView,
)
from tutor_onboarding.wizards import StudentWizard, TeacherWizard, wizard_for_role

__all__ = [
    # Flow & wizards
    "OnboardingFlow",
    "StudentWizard",
    "TeacherWizard",
    "WizardEngine",
    "wizard_for_role",
    # Catalog
    "CatalogStore",
    "StepCatalog",
    "get_default_store",
    # Aggregation
    "build_profile",
    "build_summary",
    # Models
    "FlowState",
    "Role",
    "ConfirmationSummary",
    "NavigationResult",
    "ProfileDraft",
    "ProgressItem",
    "StepView",
]
