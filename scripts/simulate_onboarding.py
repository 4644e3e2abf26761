#!/usr/bin/env python3
"""Simulate an onboarding flow end-to-end against the packaged step tables.

Drives one role from the welcome screen through every wizard step to the
confirmation screen, printing each step, its options, and the answer
chosen, then the confirmation summary and the final profile payload.

By default answers are **randomised** (``--random``, on by default) so each
run explores a different branch.  Use ``--no-random`` to always pick the
first option(s).

Usage::

    # Random role, random branch, random answers
    python scripts/simulate_onboarding.py

    # Deterministic teacher run on the "both" branch
    python scripts/simulate_onboarding.py --role teacher --path both --no-random

    # List the branches of every role
    python scripts/simulate_onboarding.py --list-paths

    # Verbose mode (include answer schemas)
    python scripts/simulate_onboarding.py -v
"""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

_SCRIPT_DIR = Path(__file__).resolve().parent
_REPO_ROOT = _SCRIPT_DIR.parent
sys.path.insert(0, str(_REPO_ROOT / "src"))

from tutor_onboarding.catalog import CatalogStore  # noqa: E402
from tutor_onboarding.config import configure_logging, load_settings  # noqa: E402
from tutor_onboarding.engine import WizardEngine  # noqa: E402
from tutor_onboarding.flow import OnboardingFlow  # noqa: E402
from tutor_onboarding.models.enums import FlowState, Role  # noqa: E402
from tutor_onboarding.models.session import (  # noqa: E402
    ConfirmationSummary,
    FieldPayload,
    ProfileDraft,
    StepView,
)

logger = logging.getLogger("simulate_onboarding")

_DOUBLE_LINE = "=" * 62

# Rate ranges picked for range_text fields in --random mode.
_RANDOM_RATE_POOL = [("10", "25"), ("15", "40"), ("20", "35"), ("30", "60"), ("12", "18")]
_DEFAULT_RATE = ("10", "25")

# Set from argv in main() and read by the answer helpers below.
_random_mode = True


# ---------------------------------------------------------------------------
# Mock answer generation
# ---------------------------------------------------------------------------


def _answer_for_field(field: FieldPayload) -> Any:
    """Pick a value for one field: option id(s) or a (min, max) pair."""
    ids = [o["id"] for o in field.options or []]
    if field.kind == "single_select":
        return random.choice(ids) if _random_mode else ids[0]
    if field.kind == "multi_select":
        if not _random_mode:
            return ids[:1]
        return random.sample(ids, k=random.randint(1, min(3, len(ids))))
    return random.choice(_RANDOM_RATE_POOL) if _random_mode else _DEFAULT_RATE


def answer_step(wizard: WizardEngine, view: StepView, forced_path: str | None) -> dict[str, Any]:
    """Fill every field on the current step; returns what was written."""
    written: dict[str, Any] = {}
    for field in view.fields:
        if field.key == wizard.discriminator_field:
            value = forced_path or _answer_for_field(field)
            wizard.set_discriminator(value)
        elif field.kind == "multi_select":
            value = _answer_for_field(field)
            for token in value:
                wizard.toggle_in_set(field.key, token)
        elif field.kind == "range_text":
            low, high = _answer_for_field(field)
            wizard.set_range_bound(field.key, "min", low)
            value = wizard.set_range_bound(field.key, "max", high)
        else:
            value = _answer_for_field(field)
            wizard.set_field(field.key, value)
        written[field.key] = value
    return written


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------


class SimPrinter:
    """Console output for the simulation using rich; silent with --quiet."""

    def __init__(self, *, quiet: bool = False, verbose: bool = False):
        self.console = Console(quiet=quiet)
        self.verbose = verbose

    def role_header(self, role: Role) -> None:
        self.console.print(f"\n[bold cyan]Role:[/] {role.value}")

    def step_header(self, view: StepView) -> None:
        self.console.print(f"\n{_DOUBLE_LINE}")
        self.console.print(
            f" [bold]STEP {view.slot}/{view.total_steps}:[/] {escape(view.title)} ({view.kind})"
        )
        self.console.print(_DOUBLE_LINE)
        self.console.print(f" {escape(view.description)}")

    def field_and_answer(self, field: FieldPayload, answer: Any) -> None:
        self.console.print(
            f"\n [dim]F:[/] {escape(field.label or field.key)} ({field.key}) -- kind: {field.kind}"
        )
        if field.options:
            self.console.print(f"     Options: {escape(', '.join(o['label'] for o in field.options))}")
        if field.placeholder:
            self.console.print(f"     Hint: {escape(field.placeholder)}")
        self.console.print(f" [dim]A:[/] {escape(str(answer))}")
        if self.verbose and field.answer_schema:
            self.console.print(
                f"     answer_schema: {escape(json.dumps(field.answer_schema, ensure_ascii=False))}"
            )

    def summary(self, summary: ConfirmationSummary) -> None:
        self.console.print(f"\n{_DOUBLE_LINE}")
        self.console.print(" [bold]CONFIRMATION[/]")
        self.console.print(_DOUBLE_LINE)
        self.console.print(f" [green]{escape(summary.headline)}[/]")
        if summary.message:
            self.console.print(f" {escape(summary.message)}")

        table = Table(title=f"Path: {summary.path_label}", show_lines=True)
        table.add_column("Field", min_width=24)
        table.add_column("Selection", min_width=30)
        for group in summary.groups:
            badges = ", ".join(group.badges)
            if group.overflow:
                badges += f" +{group.overflow}"
            table.add_row(escape(group.label), escape(badges))
        self.console.print(table)

    def payload(self, profile: ProfileDraft) -> None:
        self.console.print(f"\n [bold]Payload[/] ({profile.role.value}):")
        self.console.print_json(json.dumps(profile.as_dict(), ensure_ascii=False))

    def done(self, callbacks: int) -> None:
        self.console.print(f"\n{_DOUBLE_LINE}")
        self.console.print(f" Simulation complete ({callbacks} completion callback)")
        self.console.print(_DOUBLE_LINE)


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------


def run_simulation(
    store: CatalogStore,
    role: Role,
    path: str | None,
    printer: SimPrinter,
) -> ProfileDraft:
    completed: list[ProfileDraft] = []
    flow = OnboardingFlow(lambda r, p: completed.append(p), store=store)

    wizard = flow.start_student_flow() if role == Role.STUDENT else flow.start_teacher_flow()
    printer.role_header(role)

    while flow.state != FlowState.CONFIRMATION:
        view = wizard.current_step()
        printer.step_header(view)
        written = answer_step(wizard, view, path)
        for field in view.fields:
            printer.field_and_answer(field, written[field.key])
        result = flow.advance()
        if not result.ok:
            raise RuntimeError(f"wizard refused to advance at slot {view.slot}: missing {result.missing}")

    printer.summary(flow.summary())
    profile = flow.confirm()
    printer.payload(profile)
    printer.done(len(completed))
    return profile


def list_paths(store: CatalogStore) -> None:
    """Print every role's branches and exit."""
    for role, catalog in store.catalogs.items():
        print(f"{role.value} ({catalog.discriminator_field}):")
        for value in catalog.discriminator_values:
            print(
                f"  - {value:<10s} {catalog.discriminator_label(value):<22s} "
                f"{catalog.total_steps(value)} steps"
            )


def main() -> None:
    global _random_mode

    parser = argparse.ArgumentParser(
        description="Simulate a student or teacher onboarding flow end-to-end.",
    )
    parser.add_argument(
        "-r", "--role",
        choices=[r.value for r in Role],
        default=None,
        help="Role to onboard (default: random when --random, else student)",
    )
    parser.add_argument(
        "-p", "--path",
        default=None,
        help="Branch to take on slot 0 (studyPath / teachingFocus value)",
    )
    parser.add_argument(
        "--list-paths",
        action="store_true",
        help="List the branches of every role and exit",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Include answer_schema in logs and DEBUG logging",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress all print output (exit code still reflects success/failure)",
    )
    parser.add_argument(
        "--random",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Randomise answers (default: on). Use --no-random for deterministic mode.",
    )
    args = parser.parse_args()

    _random_mode = args.random

    settings = load_settings()
    configure_logging(settings)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    store = CatalogStore(settings.ruleset_dir)
    store.load()

    if args.list_paths:
        list_paths(store)
        sys.exit(0)

    if args.role is not None:
        role = Role(args.role)
    else:
        role = random.choice(list(Role)) if _random_mode else Role.STUDENT

    if args.path is not None and not store.catalog(role).is_discriminator_value(args.path):
        parser.error(f"unknown path '{args.path}' for role {role.value}")

    try:
        run_simulation(store, role, args.path, SimPrinter(quiet=args.quiet, verbose=args.verbose))
    except (RuntimeError, ValueError) as exc:
        logger.error("Simulation failed: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
