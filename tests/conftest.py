import pytest

from tutor_onboarding.catalog import CatalogStore
from tutor_onboarding.wizards import StudentWizard, TeacherWizard


@pytest.fixture(scope="session")
def store():
    """Load the packaged step tables once for the entire test session."""
    s = CatalogStore()
    s.load()
    return s


@pytest.fixture
def student(store):
    """Fresh StudentWizard on slot 0."""
    return StudentWizard(store.catalog("student"))


@pytest.fixture
def teacher(store):
    """Fresh TeacherWizard on slot 0."""
    return TeacherWizard(store.catalog("teacher"))
