"""CatalogStore: loads the per-role step tables into typed lookup catalogs.

This is the single source of truth for wizard structure at runtime.  Each
role's table maps ``(discriminator, slot)`` to one ``StepDefinition``; the
engine never branches on the discriminator itself, it only asks the
catalog.

Usage::

    store = CatalogStore()          # defaults to the rulesets/v1/ tables in the package
    store.load()                    # parse and validate every role file

    catalog = store.catalog("student")
    step = catalog.resolve("igcse", 2)         # -> currentGrade step
    n = catalog.total_steps("languages")       # -> 6 (slot 6 is confirmation)
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Any

import yaml

from tutor_onboarding.constants import DEFAULT_RULESET_VERSION, DISCRIMINATOR_FIELDS
from tutor_onboarding.models.catalog import RoleCatalogFile
from tutor_onboarding.models.enums import Role
from tutor_onboarding.models.step import Option, StepDefinition

logger = logging.getLogger(__name__)

_PACKAGE_RULESETS = Path(__file__).resolve().parent / "rulesets"


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


# ---------------------------------------------------------------------------
# StepCatalog
# ---------------------------------------------------------------------------

class StepCatalog:
    """Lookup table for one role: ``(discriminator, slot) -> StepDefinition``.

    Slot 0 is the path step for every discriminator, including an unset one.
    Slots ``1 .. k`` are the branch's data steps and slot ``k + 1`` (equal to
    :meth:`total_steps`) is its confirmation step.

    Built from a validated :class:`RoleCatalogFile`; raises ``ValueError``
    when the table is inconsistent (gaps in a branch, duplicate variants for
    a slot, unknown option sets or branch values).
    """

    def __init__(self, spec: RoleCatalogFile) -> None:
        self.role: Role = spec.role
        self.discriminator_field: str = spec.discriminator
        self.option_sets: dict[str, list[Option]] = spec.option_sets

        self._fill_options(spec)

        self.path_step: StepDefinition = spec.path_step.model_copy(update={"slot": 0})
        self._discriminator_values: list[str] = self.path_step.fields[0].option_ids()

        self._check_variants(spec)

        # Per-branch data steps ordered by slot (index = slot - 1) and the
        # branch's confirmation step with its slot filled in
        self._branches: dict[str, list[StepDefinition]] = {}
        self._confirmation: dict[str, StepDefinition] = {}
        for value in self._discriminator_values:
            steps = self._collect_branch(spec, value)
            self._branches[value] = steps
            self._confirmation[value] = self._collect_confirmation(spec, value, len(steps) + 1)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    def _fill_options(self, spec: RoleCatalogFile) -> None:
        """Resolve ``option_set`` references to the named option lists."""
        for step in [spec.path_step, *spec.steps]:
            for field in step.fields:
                if field.option_set is None:
                    continue
                if field.option_set not in spec.option_sets:
                    raise ValueError(
                        f"{spec.role.value}: field '{field.key}' references unknown "
                        f"option set '{field.option_set}'"
                    )
                field.options = list(spec.option_sets[field.option_set])

    def _check_variants(self, spec: RoleCatalogFile) -> None:
        allowed = set(self._discriminator_values)
        for step in [*spec.steps, *spec.confirmation]:
            unknown = [v for v in step.when if v not in allowed]
            if unknown:
                raise ValueError(
                    f"{spec.role.value}: step '{step.title}' applies to unknown "
                    f"{self.discriminator_field} value(s) {unknown}"
                )

    def _collect_branch(self, spec: RoleCatalogFile, value: str) -> list[StepDefinition]:
        steps = sorted((s for s in spec.steps if s.applies_to(value)), key=lambda s: s.slot)
        for expected, step in enumerate(steps, start=1):
            if step.slot != expected:
                # either a gap or two variants competing for the same slot
                raise ValueError(
                    f"{spec.role.value}/{value}: expected slot {expected}, "
                    f"found '{step.title}' at slot {step.slot}"
                )
        if not steps:
            raise ValueError(f"{spec.role.value}/{value}: branch has no steps")
        return steps

    def _collect_confirmation(self, spec: RoleCatalogFile, value: str, slot: int) -> StepDefinition:
        matches = [c for c in spec.confirmation if c.applies_to(value)]
        if len(matches) != 1:
            raise ValueError(
                f"{spec.role.value}/{value}: expected one confirmation step, found {len(matches)}"
            )
        return matches[0].model_copy(update={"slot": slot})

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    @property
    def discriminator_values(self) -> list[str]:
        """Branch values in table order (e.g. ``["languages", "igcse"]``)."""
        return list(self._discriminator_values)

    def is_discriminator_value(self, value: str) -> bool:
        return value in self._branches

    def total_steps(self, discriminator: str | None) -> int:
        """Number of data slots for a branch, slot 0 included.

        Also the index of the branch's confirmation slot.  With no branch
        chosen yet, returns the largest count over all branches.

        Raises:
            KeyError: if the discriminator value is not a branch of this role.
        """
        if discriminator is None:
            return max(len(steps) for steps in self._branches.values()) + 1
        return len(self._branches[discriminator]) + 1

    def resolve(self, discriminator: str | None, slot: int) -> StepDefinition:
        """Return the step active at ``slot`` for the given branch.

        Raises:
            KeyError: for an undefined slot (outside ``[0, total_steps]``, or
                a branch slot requested before a branch was chosen).
        """
        if slot == 0:
            return self.path_step
        if discriminator is None:
            raise KeyError(f"{self.role.value}: slot {slot} requires a {self.discriminator_field}")
        if discriminator not in self._branches:
            raise KeyError(f"{self.role.value}: unknown {self.discriminator_field} '{discriminator}'")
        steps = self._branches[discriminator]
        if 1 <= slot <= len(steps):
            return steps[slot - 1]
        if slot == len(steps) + 1:
            return self._confirmation[discriminator]
        raise KeyError(f"{self.role.value}/{discriminator}: undefined slot {slot}")

    def get(self, discriminator: str | None, slot: int) -> StepDefinition | None:
        """Like :meth:`resolve` but returns None for undefined slots."""
        try:
            return self.resolve(discriminator, slot)
        except KeyError:
            return None

    def branch_steps(self, discriminator: str) -> list[StepDefinition]:
        """Every step of a branch in slot order: path, data steps, confirmation."""
        return [self.path_step, *self._branches[discriminator], self._confirmation[discriminator]]

    def field_keys(self, discriminator: str) -> list[str]:
        """Field keys written by a branch, discriminator field first, de-duplicated."""
        keys: list[str] = []
        for step in self.branch_steps(discriminator):
            for key in step.field_keys:
                if key not in keys:
                    keys.append(key)
        return keys

    def discriminator_label(self, value: str) -> str:
        return self.path_step.fields[0].label_for(value)


# ---------------------------------------------------------------------------
# CatalogStore
# ---------------------------------------------------------------------------

class CatalogStore:
    """Loads ``<role>.yaml`` for every role and provides catalog lookup.

    Attributes populated after :meth:`load`:

        catalogs: dict[Role, StepCatalog]
    """

    def __init__(self, ruleset_dir: str | Path | None = None) -> None:
        if ruleset_dir is None:
            ruleset_dir = _PACKAGE_RULESETS / DEFAULT_RULESET_VERSION
        self._base = Path(ruleset_dir)
        self.catalogs: dict[Role, StepCatalog] = {}

    @property
    def base_dir(self) -> Path:
        return self._base

    def load(self) -> None:
        """Parse and validate every role file under the ruleset directory.

        Raises ``FileNotFoundError`` if a role file is missing and
        ``ValueError`` (pydantic ``ValidationError`` included) if a table is
        malformed.
        """
        for role in Role:
            raw = load_yaml(self._base / f"{role.value}.yaml")
            spec = RoleCatalogFile(**raw)
            if spec.role != role:
                raise ValueError(f"{role.value}.yaml declares role '{spec.role.value}'")
            if spec.discriminator != DISCRIMINATOR_FIELDS[role.value]:
                raise ValueError(
                    f"{role.value}.yaml: discriminator must be "
                    f"'{DISCRIMINATOR_FIELDS[role.value]}', got '{spec.discriminator}'"
                )
            self.catalogs[role] = StepCatalog(spec)
        logger.info(
            "CatalogStore loaded from %s: %s",
            self._base,
            ", ".join(
                f"{role.value}={len(cat.discriminator_values)} branches"
                for role, cat in self.catalogs.items()
            ),
        )

    def catalog(self, role: Role | str) -> StepCatalog:
        """Return the catalog for a role.

        Raises:
            ValueError: if ``role`` is not a known role.
            KeyError: if the store has not been loaded.
        """
        return self.catalogs[Role(role)]

    def version(self) -> str:
        """Content hash of the loaded YAML files, for cache busting in tools."""
        h = hashlib.sha256()
        for path in sorted(self._base.glob("*.yaml")):
            h.update(path.name.encode("utf-8"))
            h.update(path.read_bytes())
        return h.hexdigest()


_default_store: CatalogStore | None = None


def get_default_store() -> CatalogStore:
    """Return the process-wide store over the packaged tables, loading it on first use."""
    global _default_store
    if _default_store is None:
        store = CatalogStore()
        store.load()
        _default_store = store
    return _default_store
