"""WizardEngine: generic driver for a role's branching onboarding wizard.

The engine owns one :class:`WizardSession` (role, discriminator, step index,
answer draft) and resolves the active step through the role's
:class:`StepCatalog`.  It never branches on the discriminator itself; every
branch difference lives in the step table.

Slot overview (``N = catalog.total_steps(discriminator)``):
    0        path choice, writes the discriminator
    1 .. N-1 data steps for the chosen branch
    N        confirmation, terminal, no predicate

Navigation never raises for unanswered steps: ``advance()`` returns a
``blocked`` result naming the missing fields.  Writes that could not have
come from the rendered step (unknown field key, unknown option id, unknown
discriminator value) raise ``ValueError``.
"""

from __future__ import annotations

import logging
from typing import Literal

from tutor_onboarding.catalog import StepCatalog
from tutor_onboarding.constants import (
    DEFAULT_RATE_MAX,
    DEFAULT_RATE_MIN,
    RANGE_SEPARATOR,
    SELECT_KINDS,
)
from tutor_onboarding.models.enums import Role
from tutor_onboarding.models.session import (
    AnswerDraft,
    AnswerValue,
    FieldPayload,
    NavigationResult,
    ProgressItem,
    StepView,
    WizardSession,
)
from tutor_onboarding.models.step import StepDefinition, StepField
from tutor_onboarding.validation import missing_fields

logger = logging.getLogger(__name__)


def _field_answer_schema(field: StepField) -> dict:
    """Map a field's input kind to a JSON-Schema-like dict."""
    if field.kind == "single_select":
        return {"type": "string", "enum": field.option_ids()}
    elif field.kind == "multi_select":
        return {
            "type": "array",
            "items": {"type": "string", "enum": field.option_ids()},
            "minItems": 1,
            "uniqueItems": True,
        }
    else:
        # range_text: "<min>-<max>", presence is all that is checked
        return {"type": "string", "minLength": 1}


def split_range(text: str | None) -> tuple[str, str]:
    """Split a ``"<min>-<max>"`` string, filling empty sides with the defaults.

    Only the first two parts count: ``"1-2-3"`` splits to ``("1", "2")``.
    """
    parts = (text or "").split(RANGE_SEPARATOR)
    low = parts[0]
    high = parts[1] if len(parts) > 1 else ""
    return low or DEFAULT_RATE_MIN, high or DEFAULT_RATE_MAX


class WizardEngine:
    """Drives one wizard traversal over a role's step catalog.

    Args:
        catalog: the role's loaded :class:`StepCatalog`
        session: an existing session to resume; a fresh one is created
                 when omitted

    Raises:
        ValueError: if a resumed session does not fit the catalog (other
            role, unknown branch, or a step index outside the branch).
    """

    def __init__(self, catalog: StepCatalog, session: WizardSession | None = None) -> None:
        if session is None:
            session = WizardSession(role=catalog.role)
        else:
            self._check_session(catalog, session)
        self._catalog = catalog
        self._session = session

    @staticmethod
    def _check_session(catalog: StepCatalog, session: WizardSession) -> None:
        if session.role != catalog.role:
            raise ValueError(
                f"session role '{session.role.value}' does not match catalog role "
                f"'{catalog.role.value}'"
            )
        d = session.discriminator
        if d is None:
            if session.step_index != 0:
                raise ValueError(
                    f"session at slot {session.step_index} has no {catalog.discriminator_field}"
                )
            return
        if not catalog.is_discriminator_value(d):
            raise ValueError(
                f"session has unknown {catalog.discriminator_field} '{d}' "
                f"for role '{catalog.role.value}'"
            )
        total = catalog.total_steps(d)
        if session.step_index > total:
            raise ValueError(
                f"session slot {session.step_index} is past the {d} branch's "
                f"last slot {total}"
            )

    # ==================================================================
    # Session state
    # ==================================================================

    @property
    def catalog(self) -> StepCatalog:
        return self._catalog

    @property
    def session(self) -> WizardSession:
        return self._session

    @property
    def role(self) -> Role:
        return self._session.role

    @property
    def discriminator_field(self) -> str:
        return self._catalog.discriminator_field

    @property
    def discriminator(self) -> str | None:
        return self._session.discriminator

    @property
    def step_index(self) -> int:
        return self._session.step_index

    @property
    def answers(self) -> AnswerDraft:
        """Snapshot of the answer draft (lists copied)."""
        return {k: list(v) if isinstance(v, list) else v for k, v in self._session.answers.items()}

    @property
    def total_steps(self) -> int:
        """Index of the terminal confirmation slot for the current branch."""
        return self._catalog.total_steps(self._session.discriminator)

    def current_definition(self) -> StepDefinition:
        """The step variant active at the current index."""
        return self._catalog.resolve(self._session.discriminator, self._session.step_index)

    def is_complete(self) -> bool:
        return self._session.step_index == self.total_steps

    def can_advance(self) -> bool:
        """True if the active step's predicate passes (no state change)."""
        return not self._missing()

    def _missing(self) -> list[str]:
        return missing_fields(
            self.current_definition(), self._session.answers, self._session.discriminator
        )

    # ==================================================================
    # Navigation
    # ==================================================================

    def advance(self) -> NavigationResult:
        """Move forward one slot if the active step validates.

        Returns ``completed`` when the terminal slot is reached (or the
        wizard is already on it), ``blocked`` with the missing field keys
        when the step does not validate, and ``advanced`` otherwise.
        """
        s = self._session
        total = self.total_steps
        if s.step_index >= total:
            return NavigationResult(outcome="completed", step_index=s.step_index)

        missing = self._missing()
        if missing:
            logger.debug(
                "%s wizard blocked at slot %d: missing %s", s.role.value, s.step_index, missing
            )
            return NavigationResult(outcome="blocked", step_index=s.step_index, missing=missing)

        s.step_index += 1
        logger.debug("%s wizard advanced to slot %d/%d", s.role.value, s.step_index, total)
        outcome = "completed" if s.step_index == total else "advanced"
        return NavigationResult(outcome=outcome, step_index=s.step_index)

    def retreat(self) -> NavigationResult:
        """Move back one slot, never below 0.  Answers are kept."""
        s = self._session
        if s.step_index == 0:
            return NavigationResult(outcome="unchanged", step_index=0)
        s.step_index -= 1
        logger.debug("%s wizard retreated to slot %d", s.role.value, s.step_index)
        return NavigationResult(outcome="retreated", step_index=s.step_index)

    # ==================================================================
    # Answer writes
    # ==================================================================

    def set_discriminator(self, value: str) -> bool:
        """Choose the branch.  Only honoured on slot 0.

        Returns False (and changes nothing) when called on any other slot.
        Repeated calls on slot 0 overwrite each other.  Answers collected on
        an abandoned branch stay in the draft but are not part of the
        final profile.  A key the new branch shares with the old one keeps
        only the tokens that are options on the new branch, so a languages
        ``learningObjective`` does not carry over into an igcse profile.

        Raises:
            ValueError: if ``value`` is not one of the role's branch values.
        """
        s = self._session
        if not self._catalog.is_discriminator_value(value):
            raise ValueError(
                f"unknown {self.discriminator_field} '{value}' for role '{s.role.value}'"
            )
        if s.step_index != 0:
            logger.warning(
                "Ignoring %s change to '%s' at slot %d (only allowed on slot 0)",
                self.discriminator_field, value, s.step_index,
            )
            return False
        if s.discriminator != value:
            logger.debug("%s wizard %s set to '%s'", s.role.value, self.discriminator_field, value)
            self._drop_foreign_tokens(value)
        s.discriminator = value
        s.answers[self.discriminator_field] = value
        return True

    def _drop_foreign_tokens(self, discriminator: str) -> None:
        """Strip draft tokens that are not options on the branch's select fields."""
        allowed: dict[str, set[str]] = {}
        for step in self._catalog.branch_steps(discriminator)[1:]:
            for f in step.fields:
                if f.kind in SELECT_KINDS:
                    allowed.setdefault(f.key, set()).update(f.option_ids())

        answers = self._session.answers
        for key, ids in allowed.items():
            current = answers.get(key)
            if isinstance(current, list):
                kept = [t for t in current if t in ids]
                if len(kept) == len(current):
                    continue
                if kept:
                    answers[key] = kept
                else:
                    del answers[key]
            elif isinstance(current, str) and current not in ids:
                del answers[key]
            else:
                continue
            logger.debug("Dropped %s tokens not offered on the %s branch", key, discriminator)

    def _active_field(self, key: str) -> StepField:
        step = self.current_definition()
        field = step.get_field(key)
        if field is None:
            raise ValueError(
                f"field '{key}' is not on the active step "
                f"(slot {self._session.step_index}: {step.title})"
            )
        return field

    def set_field(self, key: str, value: AnswerValue) -> None:
        """Overwrite a field on the active step.

        Single select takes an option id, multi select a list of option ids
        (duplicates collapsed, order kept), range text any string, stored
        as given.  Writing the discriminator field goes through
        :meth:`set_discriminator`.

        Raises:
            ValueError: if ``key`` is not on the active step, or an option
                id is not in the field's option set.
        """
        field = self._active_field(key)

        if key == self.discriminator_field:
            if not isinstance(value, str):
                raise ValueError(f"'{key}' takes a single option id")
            self.set_discriminator(value)
            return

        if field.kind == "single_select":
            if not isinstance(value, str):
                raise ValueError(f"'{key}' takes a single option id, got {type(value).__name__}")
            self._check_option(field, value)
            stored: AnswerValue = value
        elif field.kind == "multi_select":
            if isinstance(value, str):
                raise ValueError(f"'{key}' takes a list of option ids")
            stored = []
            for token in value:
                self._check_option(field, token)
                if token not in stored:
                    stored.append(token)
        else:
            if not isinstance(value, str):
                raise ValueError(f"'{key}' takes a string, got {type(value).__name__}")
            stored = value

        self._session.answers[key] = stored

    def toggle_in_set(self, key: str, token: str) -> list[str]:
        """Add ``token`` to a multi-select field, or remove it if present.

        The other tokens keep their order, so toggling twice restores the
        original list.  Returns the updated list.
        """
        field = self._active_field(key)
        if field.kind != "multi_select":
            raise ValueError(f"'{key}' is a {field.kind} field, not multi_select")
        self._check_option(field, token)

        current = self._session.answers.get(key)
        selected = list(current) if isinstance(current, list) else []
        if token in selected:
            selected.remove(token)
        else:
            selected.append(token)
        self._session.answers[key] = selected
        return list(selected)

    def set_range_bound(self, key: str, bound: Literal["min", "max"], value: str) -> str:
        """Update one side of a range field, keeping (or defaulting) the other.

        Returns the new composite string.
        """
        field = self._active_field(key)
        if field.kind != "range_text":
            raise ValueError(f"'{key}' is a {field.kind} field, not range_text")
        if bound not in ("min", "max"):
            raise ValueError(f"bound must be 'min' or 'max', got '{bound}'")

        current = self._session.answers.get(key)
        low, high = split_range(current if isinstance(current, str) else None)
        if bound == "min":
            low = value
        else:
            high = value
        composite = f"{low}{RANGE_SEPARATOR}{high}"
        self._session.answers[key] = composite
        return composite

    @staticmethod
    def _check_option(field: StepField, token: str) -> None:
        if token not in field.option_ids():
            raise ValueError(f"'{token}' is not an option of field '{field.key}'")

    # ==================================================================
    # Views
    # ==================================================================

    def current_step(self) -> StepView:
        """Render-ready view of the active step, pre-filled from the draft."""
        s = self._session
        step = self.current_definition()

        fields: list[FieldPayload] = []
        for f in step.fields:
            if f.key == self.discriminator_field:
                current = s.discriminator
            else:
                current = s.answers.get(f.key)
                if isinstance(current, list):
                    current = list(current)
            fields.append(FieldPayload(
                key=f.key,
                kind=f.kind,
                label=f.label,
                placeholder=f.placeholder,
                options=[o.model_dump() for o in f.options] if f.options else None,
                answer_schema=_field_answer_schema(f),
                current_value=current,
            ))

        return StepView(
            role=s.role,
            slot=s.step_index,
            total_steps=self.total_steps,
            kind=step.kind,
            title=step.title,
            description=step.description,
            icon=step.icon,
            message=step.message,
            fields=fields,
            can_advance=self.can_advance(),
            is_first=s.step_index == 0,
            is_confirmation=step.is_confirmation,
        )

    def progress(self) -> list[ProgressItem]:
        """Step indicator entries for every slot reached so far."""
        s = self._session
        items: list[ProgressItem] = []
        for slot in range(s.step_index + 1):
            step = self._catalog.resolve(s.discriminator, slot)
            items.append(ProgressItem(
                slot=slot,
                title=step.title,
                status="current" if slot == s.step_index else "completed",
            ))
        return items
