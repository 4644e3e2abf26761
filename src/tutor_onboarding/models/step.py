"""Step definition models for the onboarding step catalog.

Each wizard slot is described by one or more ``StepDefinition`` variants.
A variant applies to the discriminator values listed in ``when`` (an empty
list means "every branch").  Step kinds:

    - path: slot 0, the discriminator choice itself
    - input: a data-collection step with one or more fields
    - confirmation: the terminal read-only summary slot

Every field declares an input kind that maps to a UI component and to the
validation predicate the engine applies before leaving the step:

    - single_select: pick one option; passes when a value is set
    - multi_select: toggle options in and out of a list; passes when non-empty
    - range_text: "<min>-<max>" composite string; passes when non-empty
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from tutor_onboarding.constants import SELECT_KINDS

InputKind = Literal["single_select", "multi_select", "range_text"]
StepKind = Literal["path", "input", "confirmation"]


class Option(BaseModel):
    """A selectable option with an id, display label, and optional icon tag."""

    id: str
    label: str
    icon: Optional[str] = None


class StepField(BaseModel):
    """One answer slot on a step, written to ``AnswerDraft[key]``.

    Select kinds reference a named option set from the catalog file
    (``option_set``); the store fills ``options`` in at load time.
    """

    key: str
    kind: InputKind
    label: Optional[str] = None
    # Hint text for range_text inputs
    placeholder: Optional[str] = None
    option_set: Optional[str] = None
    options: List[Option] = Field(default_factory=list)

    @model_validator(mode="after")
    def _chk(self):
        if self.kind in SELECT_KINDS and not (self.option_set or self.options):
            raise ValueError(f"field '{self.key}' ({self.kind}) needs an option set")
        if self.kind == "range_text" and (self.option_set or self.options):
            raise ValueError(f"field '{self.key}' (range_text) cannot carry options")
        return self

    def option_ids(self) -> list[str]:
        return [o.id for o in self.options]

    def label_for(self, option_id: str) -> str:
        """Display label for an option id, falling back to the id itself."""
        for opt in self.options:
            if opt.id == option_id:
                return opt.label
        return option_id


class StepDefinition(BaseModel):
    """A single wizard step variant.

    ``slot`` is assigned from the YAML for path/input steps; confirmation
    steps get theirs at load time, one past the branch's last data slot.
    """

    slot: int = Field(default=0, ge=0)
    kind: StepKind = "input"
    title: str
    description: str
    icon: Optional[str] = None
    when: List[str] = Field(default_factory=list)
    fields: List[StepField] = Field(default_factory=list)
    # Follow-up line shown under the description (confirmation steps)
    message: Optional[str] = None

    @model_validator(mode="after")
    def _chk(self):
        if self.kind == "confirmation" and self.fields:
            raise ValueError("confirmation steps cannot declare fields")
        if self.kind == "input" and not self.fields:
            raise ValueError(f"input step at slot {self.slot} has no fields")
        if self.kind == "path" and len(self.fields) != 1:
            raise ValueError("path step must declare exactly one field")
        return self

    @property
    def is_confirmation(self) -> bool:
        return self.kind == "confirmation"

    @property
    def field_keys(self) -> list[str]:
        return [f.key for f in self.fields]

    def applies_to(self, discriminator: str | None) -> bool:
        """True if this variant is active for the given discriminator value."""
        if not self.when:
            return True
        return discriminator in self.when

    def get_field(self, key: str) -> StepField | None:
        for f in self.fields:
            if f.key == key:
                return f
        return None
