"""Role-bound wizards: the generic engine instantiated per role.

``StudentWizard`` branches on ``studyPath`` (languages | igcse) and
``TeacherWizard`` on ``teachingFocus`` (languages | igcse | both).  Both
default to the catalogs shipped with the package.
"""

from __future__ import annotations

from tutor_onboarding.catalog import CatalogStore, StepCatalog, get_default_store
from tutor_onboarding.engine import WizardEngine
from tutor_onboarding.models.enums import Role
from tutor_onboarding.models.session import WizardSession


class _RoleWizard(WizardEngine):
    ROLE: Role

    def __init__(
        self,
        catalog: StepCatalog | None = None,
        session: WizardSession | None = None,
    ) -> None:
        if catalog is None:
            catalog = get_default_store().catalog(self.ROLE)
        if catalog.role != self.ROLE:
            raise ValueError(
                f"{type(self).__name__} needs the '{self.ROLE.value}' catalog, "
                f"got '{catalog.role.value}'"
            )
        super().__init__(catalog, session)


class StudentWizard(_RoleWizard):
    """Student onboarding: study path, then five branch-specific steps."""

    ROLE = Role.STUDENT

    @property
    def study_path(self) -> str | None:
        return self.discriminator

    def choose_path(self, value: str) -> bool:
        return self.set_discriminator(value)


class TeacherWizard(_RoleWizard):
    """Teacher onboarding: teaching focus, then six steps ending in a rate range."""

    ROLE = Role.TEACHER

    @property
    def teaching_focus(self) -> str | None:
        return self.discriminator

    def choose_focus(self, value: str) -> bool:
        return self.set_discriminator(value)

    def set_rate_range(self, low: str, high: str) -> str:
        """Write both sides of ``ratePreference`` (slot 6)."""
        self.set_range_bound("ratePreference", "min", low)
        return self.set_range_bound("ratePreference", "max", high)


_WIZARDS: dict[Role, type[_RoleWizard]] = {
    Role.STUDENT: StudentWizard,
    Role.TEACHER: TeacherWizard,
}


def wizard_for_role(role: Role | str, store: CatalogStore | None = None) -> WizardEngine:
    """Create a fresh wizard for ``role`` from ``store`` (default store if None)."""
    role = Role(role)
    catalog = (store or get_default_store()).catalog(role)
    return _WIZARDS[role](catalog)
