"""Session and step models: the contract between the engine and its callers.

These models define what the wizard exposes at each step and what it hands
over at completion.  They carry no rendering details beyond what a UI needs
to draw the step.

    - WizardSession: role, discriminator, step index, answer draft
    - StepView: flattened, render-ready view of the active step
    - NavigationResult: outcome of advance()/retreat()
    - ProgressItem: one entry of the step indicator
    - ProfileDraft: immutable completion payload
    - ConfirmationSummary: read-only summary shown before confirming
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from tutor_onboarding.models.enums import Role

# A draft value is a radio token, a list of toggled tokens, or a range string.
AnswerValue = Union[str, List[str]]
AnswerDraft = Dict[str, AnswerValue]


class WizardSession(BaseModel):
    """Mutable state of one wizard traversal.

    Owned exclusively by the engine that created it; discarded when the
    flow goes back to the welcome screen or completes.
    """

    role: Role
    discriminator: Optional[str] = None
    step_index: int = Field(default=0, ge=0)
    answers: AnswerDraft = Field(default_factory=dict)


class FieldPayload(BaseModel):
    """Flattened step field for UI consumers."""

    key: str
    kind: str
    label: Optional[str] = None
    placeholder: Optional[str] = None
    # [{id, label, icon}] for select kinds
    options: list[dict] | None = None
    # JSON-schema-like description of an acceptable value
    answer_schema: dict | None = None
    # Pre-filled from the draft so the UI can restore earlier answers
    current_value: AnswerValue | None = None


class StepView(BaseModel):
    """Render-ready view of the active step."""

    role: Role
    slot: int
    total_steps: int
    kind: str
    title: str
    description: str
    icon: str | None = None
    message: str | None = None
    fields: list[FieldPayload] = Field(default_factory=list)
    can_advance: bool = False
    is_first: bool = False
    is_confirmation: bool = False


class NavigationResult(BaseModel):
    """Outcome of a navigation call.

    ``blocked`` means the active step's predicate failed; the index did not
    move and ``missing`` names the unanswered field keys.  UIs are expected
    to keep the forward control disabled rather than show an error.
    """

    outcome: Literal["advanced", "completed", "retreated", "blocked", "unchanged"]
    step_index: int
    missing: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.outcome in ("advanced", "completed", "retreated")


class ProgressItem(BaseModel):
    """One entry of the step indicator (steps reached so far)."""

    slot: int
    title: str
    status: Literal["completed", "current"]


class ProfileDraft(BaseModel):
    """Finalized profile handed to the completion callback.

    Frozen; multi-select values are stored as tuples so the payload cannot be
    mutated after creation.  ``as_dict()`` returns a fresh plain dict.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    discriminator_field: str
    discriminator: str
    answers: Tuple[Tuple[str, Union[str, Tuple[str, ...]]], ...] = ()

    def get(self, key: str, default: Any = None) -> Any:
        for k, v in self.answers:
            if k == key:
                return list(v) if isinstance(v, tuple) else v
        return default

    def keys(self) -> list[str]:
        return [k for k, _ in self.answers]

    def as_dict(self) -> dict[str, AnswerValue]:
        """Plain ``{field: value}`` payload, discriminator field included."""
        return {k: list(v) if isinstance(v, tuple) else v for k, v in self.answers}


class SummaryBadgeGroup(BaseModel):
    """A labelled group of badges on the confirmation summary."""

    key: str
    label: str
    badges: list[str]
    # Number of selections hidden behind the "+N" badge
    overflow: int = 0


class ConfirmationSummary(BaseModel):
    """Read-only summary of a completed wizard, built from a ProfileDraft."""

    role: Role
    headline: str
    message: str | None = None
    path_label: str
    groups: list[SummaryBadgeGroup] = Field(default_factory=list)
