"""Onboarding constants shared across the SDK.

These values are referenced by the catalog, engine, and aggregator.  They
mirror conventions encoded in the YAML step tables under ``rulesets/v1/``.

Several constants can be overridden via environment variables so that
deployments can adjust display defaults without code changes.
"""

import os

# Discriminator field written on slot 0 of each role's wizard.
DISCRIMINATOR_FIELDS: dict[str, str] = {
    "student": "studyPath",
    "teacher": "teachingFocus",
}

# Select input kinds carry an option set; range_text holds a "<min>-<max>"
# composite string and carries none.
SELECT_KINDS: set[str] = {"single_select", "multi_select"}

# Placeholders used when only one side of a rate range has been typed.
# Overridable via DEFAULT_RATE_MIN / DEFAULT_RATE_MAX env vars.
DEFAULT_RATE_MIN = os.getenv("DEFAULT_RATE_MIN", "10")
DEFAULT_RATE_MAX = os.getenv("DEFAULT_RATE_MAX", "50")

# Separator between the two sides of a range_text value.
RANGE_SEPARATOR = "-"

# Number of multi-select labels shown in the confirmation summary before the
# remainder collapses into a "+N" overflow badge.
SUMMARY_BADGE_LIMIT = int(os.getenv("SUMMARY_BADGE_LIMIT", "2"))

# Ruleset version shipped inside the package.
DEFAULT_RULESET_VERSION = "v1"
