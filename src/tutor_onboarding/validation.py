"""Step validation: decides whether the wizard may leave the active step.

The predicate is derived from the step's field kinds; nothing is declared
per step in the YAML tables:

  - **single_select**: passes iff the field holds a non-empty token
  - **multi_select**: passes iff the list is non-empty; every multi-select
    field on a step must pass (teacher slot 1 for focus ``both``)
  - **range_text**: passes iff the composite string is non-empty; bounds are
    neither parsed nor ordered
  - **path** steps pass once the discriminator is set
  - **confirmation** steps have no predicate

Validation failure is a normal outcome, not an error: callers get the list
of unanswered field keys and decide how to present it.
"""

from __future__ import annotations

import logging

from tutor_onboarding.models.session import AnswerDraft, AnswerValue
from tutor_onboarding.models.step import StepDefinition, StepField

logger = logging.getLogger(__name__)


def field_satisfied(field: StepField, value: AnswerValue | None) -> bool:
    """Apply the kind-specific predicate to a single draft value."""
    kind = field.kind
    if kind == "single_select":
        return isinstance(value, str) and value != ""
    elif kind == "multi_select":
        return isinstance(value, list) and len(value) > 0
    elif kind == "range_text":
        return isinstance(value, str) and value != ""
    else:
        logger.warning("field_satisfied() called with unknown kind: %s", kind)
        return False


def missing_fields(
    step: StepDefinition,
    answers: AnswerDraft,
    discriminator: str | None = None,
) -> list[str]:
    """Return the keys on ``step`` that keep the wizard from advancing.

    Args:
        step: the active step variant
        answers: the wizard's answer draft
        discriminator: the branch value, consulted only for the path step

    Returns:
        Field keys in step order; empty when the step passes.
    """
    if step.is_confirmation:
        return []
    if step.kind == "path":
        return [] if discriminator else [step.fields[0].key]
    return [f.key for f in step.fields if not field_satisfied(f, answers.get(f.key))]


def is_step_valid(
    step: StepDefinition,
    answers: AnswerDraft,
    discriminator: str | None = None,
) -> bool:
    return not missing_fields(step, answers, discriminator)
