"""ProfileAggregator: turns a finished answer draft into the completion payload.

``build_profile`` is pure and has no failure modes: it copies the draft
verbatim (no re-validation) into a frozen :class:`ProfileDraft`, keeping
only the active branch's fields when the caller passes them.

``build_summary`` renders the read-only confirmation view from a profile:
option ids become labels, long selections collapse into a "+N" badge, and
the rate range is shown as an hourly price.
"""

from __future__ import annotations

import logging
from typing import Iterable

from tutor_onboarding.catalog import StepCatalog
from tutor_onboarding.constants import DISCRIMINATOR_FIELDS, SUMMARY_BADGE_LIMIT
from tutor_onboarding.engine import split_range
from tutor_onboarding.models.enums import Role
from tutor_onboarding.models.session import (
    AnswerDraft,
    ConfirmationSummary,
    ProfileDraft,
    SummaryBadgeGroup,
)
from tutor_onboarding.models.step import StepField

logger = logging.getLogger(__name__)


def build_profile(
    role: Role | str,
    discriminator: str,
    answers: AnswerDraft,
    *,
    field_keys: Iterable[str] | None = None,
) -> ProfileDraft:
    """Freeze ``answers`` into a ProfileDraft.

    The discriminator field always comes first.  Fields never written are
    absent, not null.  With ``field_keys`` given, keys outside it (answers
    left behind by a branch abandoned on slot 0) are dropped.
    """
    role = Role(role)
    dfield = DISCRIMINATOR_FIELDS[role.value]
    allowed = set(field_keys) if field_keys is not None else None

    items: list[tuple] = [(dfield, discriminator)]
    for key, value in answers.items():
        if key == dfield:
            continue
        if allowed is not None and key not in allowed:
            continue
        items.append((key, tuple(value) if isinstance(value, list) else value))

    return ProfileDraft(
        role=role,
        discriminator_field=dfield,
        discriminator=discriminator,
        answers=tuple(items),
    )


def format_rate(value: str) -> str:
    """``"10-25"`` -> ``"$10-25 per hour"``."""
    low, high = split_range(value)
    return f"${low}-{high} per hour"


def _badges(field: StepField, value, limit: int) -> tuple[list[str], int]:
    if field.kind == "range_text":
        return [format_rate(value)], 0
    if isinstance(value, (list, tuple)):
        labels = [field.label_for(v) for v in value]
        return labels[:limit], max(len(labels) - limit, 0)
    return [field.label_for(value)], 0


def build_summary(
    catalog: StepCatalog,
    profile: ProfileDraft,
    *,
    badge_limit: int = SUMMARY_BADGE_LIMIT,
) -> ConfirmationSummary:
    """Build the confirmation summary for a profile of ``catalog``'s role.

    One badge group per answered field, in step order.  A field written on
    two slots (the igcse ``studyFrequency``) is listed once.

    Raises:
        ValueError: if the profile belongs to another role.
    """
    if profile.role != catalog.role:
        raise ValueError(
            f"profile role '{profile.role.value}' does not match catalog role "
            f"'{catalog.role.value}'"
        )
    d = profile.discriminator
    steps = catalog.branch_steps(d)
    confirmation = steps[-1]

    groups: list[SummaryBadgeGroup] = []
    seen: set[str] = set()
    for step in steps[1:-1]:
        for field in step.fields:
            if field.key in seen:
                continue
            value = profile.get(field.key)
            if value is None:
                continue
            seen.add(field.key)
            badges, overflow = _badges(field, value, badge_limit)
            groups.append(SummaryBadgeGroup(
                key=field.key,
                label=field.label or step.title,
                badges=badges,
                overflow=overflow,
            ))

    logger.debug("Built %s summary for %s=%s with %d groups",
                 catalog.role.value, catalog.discriminator_field, d, len(groups))
    return ConfirmationSummary(
        role=profile.role,
        headline=confirmation.description,
        message=confirmation.message,
        path_label=catalog.discriminator_label(d),
        groups=groups,
    )
