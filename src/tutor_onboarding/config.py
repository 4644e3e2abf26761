"""SDK configuration: reads settings from environment variables.

All settings have sensible defaults for local development.  Deployments
override them via ``ONBOARDING_*`` env vars.
"""

import logging
import os
from dataclasses import dataclass

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class OnboardingSettings:
    """Immutable configuration read from the environment at startup."""

    # Step table directory (None → the rulesets/v1/ tables shipped in the package)
    ruleset_dir: str | None = None

    # Logging
    log_level: str = "INFO"

    # Catalog inspector (developer tool)
    inspector_host: str = "127.0.0.1"
    inspector_port: int = 8000


def load_settings() -> OnboardingSettings:
    """Build settings from ``ONBOARDING_*`` environment variables."""
    return OnboardingSettings(
        ruleset_dir=os.getenv("ONBOARDING_RULESET_DIR") or None,
        log_level=os.getenv("ONBOARDING_LOG_LEVEL", "INFO").upper(),
        inspector_host=os.getenv("ONBOARDING_INSPECTOR_HOST", "127.0.0.1"),
        inspector_port=int(os.getenv("ONBOARDING_INSPECTOR_PORT", "8000")),
    )


def configure_logging(settings: OnboardingSettings | None = None) -> None:
    """Apply the shared log format at the configured level."""
    if settings is None:
        settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
    )
