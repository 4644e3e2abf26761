"""Pydantic schema for the per-role step tables in ``rulesets/v1/``.

One YAML file per role::

    role: student
    discriminator: studyPath
    option_sets:
      study_paths: [{id, label, icon}, ...]
      ...
    path_step: {title, description, icon, fields: [{key, kind, option_set}]}
    steps:
      - {slot, when, title, description, icon, fields: [...]}
    confirmation:
      - {when, title, description, message}

The store validates a parsed file against this schema before building the
lookup table, so malformed tables fail at load time rather than mid-wizard.
"""

from typing import Dict, List

from pydantic import BaseModel, Field, model_validator

from tutor_onboarding.models.enums import Role
from tutor_onboarding.models.step import Option, StepDefinition


class RoleCatalogFile(BaseModel):
    """Raw contents of one role's step table."""

    role: Role
    discriminator: str
    option_sets: Dict[str, List[Option]] = Field(default_factory=dict)
    path_step: StepDefinition
    steps: List[StepDefinition]
    confirmation: List[StepDefinition]

    @model_validator(mode="after")
    def _chk(self):
        path_field = self.path_step.fields[0] if self.path_step.fields else None
        if path_field is None or path_field.key != self.discriminator:
            raise ValueError(
                f"path_step must write the discriminator field '{self.discriminator}'"
            )
        if path_field.kind != "single_select":
            raise ValueError("path_step field must be a single_select")
        for step in self.steps:
            if step.slot < 1:
                raise ValueError(f"step '{step.title}' must use a slot >= 1")
        for step in self.confirmation:
            if step.kind != "confirmation":
                raise ValueError(f"confirmation entry '{step.title}' has kind '{step.kind}'")
        return self
