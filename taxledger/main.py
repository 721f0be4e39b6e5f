from __future__ import annotations

import argparse
import os
import re
import sys
from pathlib import Path
from typing import Literal

if __package__ in (None, ""):
    sys.path.append(str(Path(__file__).resolve().parent.parent))

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from taxledger.config import Settings, get_settings
from taxledger.core.amounts import D, parse_amount, quantize_cents
from taxledger.core.brackets import read_brackets
from taxledger.core.evaluator import assess
from taxledger.core.models import LedgerEntry
from taxledger.ledger.search import find_latest, latest_by_employee
from taxledger.ledger.storage import append_entry, read_ledger
from taxledger.loading import attempt_load
from taxledger.shell import StreamInput, TaxShell, console_print
from taxledger.telemetry import close_log_sink, open_log_sink

ColorPreference = Literal["auto", "always", "never"]

_EMPLOYEE_ID = re.compile(r"\d{4}")
_BRACKETS_HELP = "Path to the tax rates file (default: taxrates.txt)."
_LEDGER_HELP = "Path to the tax report ledger (default: taxreport.txt)."


def _resolve_color_preference(pref: ColorPreference) -> ColorPreference:
    if pref == "auto" and os.getenv("NO_COLOR"):
        return "never"
    return pref


def _get_console(pref: ColorPreference) -> Console | None:
    resolved = _resolve_color_preference(pref)
    if resolved == "never":
        return None
    return Console(force_terminal=resolved == "always" or None)


def _employee_id(text: str) -> int:
    cleaned = text.strip()
    if not _EMPLOYEE_ID.fullmatch(cleaned):
        raise argparse.ArgumentTypeError(f"employee id must be exactly 4 digits, got '{text}'")
    return int(cleaned)


def _income(text: str) -> D:
    try:
        return quantize_cents(parse_amount(text))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _with_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    updates = {}
    if getattr(args, "brackets", None):
        updates["brackets_file"] = args.brackets
    if getattr(args, "ledger", None):
        updates["ledger_file"] = args.ledger
    if not updates:
        return settings
    return settings.model_copy(update=updates)


def _run_calc(args: argparse.Namespace, settings: Settings, console) -> int:
    result = attempt_load(read_brackets, settings.brackets_file)
    if result.error is not None:
        console_print(console, f"ERROR: {result.error.message}")
        return 1
    profile = settings.evaluation()
    assessment = assess(result.value, args.income, match=profile.match, additive=profile.additive)
    entry = LedgerEntry(
        employee_id=args.employee_id,
        taxable_income=assessment.income,
        total_tax=assessment.tax,
    )
    if assessment.bracket is not None:
        console_print(console, assessment.bracket.describe())
    else:
        console_print(console, "No bracket contains this income; tax is zero.")
    console_print(console, f"For Employee ID: {entry.employee_code}")
    console_print(console, f"With Income: ${entry.taxable_income:.2f}")
    console_print(console, f"The total tax is: ${entry.total_tax:.2f}")
    if args.no_save:
        console_print(console, "Skipped saving because --no-save was used.")
    elif append_entry(entry, settings.ledger_file):
        console_print(console, f"Record written to {settings.ledger_file}")
    else:
        console_print(console, f"WARNING: could not write the record to {settings.ledger_file}")
    return 0


def _run_search(args: argparse.Namespace, settings: Settings, console) -> int:
    result = attempt_load(read_ledger, settings.ledger_file)
    if result.error is not None:
        console_print(console, f"ERROR: {result.error.message}")
        return 1
    entry = find_latest(result.value, args.employee_id)
    if entry is None:
        console_print(console, f"The Employee ID: {args.employee_id:04d} was not found.")
        return 1
    console_print(console, entry.describe())
    return 0


def _run_brackets(settings: Settings, console) -> int:
    result = attempt_load(read_brackets, settings.brackets_file)
    if result.error is not None:
        console_print(console, f"ERROR: {result.error.message}")
        return 1
    for index, bracket in enumerate(result.value, start=1):
        console_print(console, f"{index}. {bracket.describe()}")
    return 0


def _run_history(settings: Settings, console) -> int:
    result = attempt_load(read_ledger, settings.ledger_file)
    if result.error is not None:
        console_print(console, f"ERROR: {result.error.message}")
        return 1
    latest = latest_by_employee(result.value)
    if not latest:
        console_print(console, "The ledger has no entries yet.")
        return 0
    if console is not None:
        table = Table(title="Latest ledger entry per employee", expand=False)
        for column in ("Employee ID", "Taxable Income", "Tax"):
            table.add_column(column)
        for entry in latest.values():
            table.add_row(entry.employee_code, f"{entry.taxable_income:.2f}", f"{entry.total_tax:.2f}")
        console.print(table)
        return 0
    for entry in latest.values():
        print(entry.to_line())
    return 0


def _file_options(*, brackets: bool, ledger: bool) -> argparse.ArgumentParser:
    # SUPPRESS keeps a subcommand from clearing a path given before it.
    options = argparse.ArgumentParser(add_help=False)
    if brackets:
        options.add_argument("--brackets", default=argparse.SUPPRESS, help=_BRACKETS_HELP)
    if ledger:
        options.add_argument("--ledger", default=argparse.SUPPRESS, help=_LEDGER_HELP)
    return options


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tax-ledger",
        description="Calculate tax from a bracket file and keep a ledger of the results.",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output preference (default: auto).",
    )
    parser.add_argument(
        "--no-color",
        dest="color",
        action="store_const",
        const="never",
        help="Alias for --color never.",
    )
    parser.add_argument("--brackets", help=_BRACKETS_HELP)
    parser.add_argument("--ledger", help=_LEDGER_HELP)
    both = _file_options(brackets=True, ledger=True)
    rates_only = _file_options(brackets=True, ledger=False)
    ledger_only = _file_options(brackets=False, ledger=True)
    commands = parser.add_subparsers(dest="command")
    commands.add_parser("shell", parents=[both], help="Interactive menu (default).")

    calc = commands.add_parser("calc", parents=[both], help="Calculate tax for one employee.")
    calc.add_argument("--employee-id", type=_employee_id, required=True, help="Four digit employee id.")
    calc.add_argument("--income", type=_income, required=True, help="Taxable income, e.g. $50,000.")
    calc.add_argument("--no-save", action="store_true", help="Do not append the result to the ledger.")

    search = commands.add_parser(
        "search", parents=[ledger_only], help="Show the latest ledger entry for an employee."
    )
    search.add_argument("--employee-id", type=_employee_id, required=True, help="Four digit employee id.")

    commands.add_parser(
        "brackets", parents=[rates_only], help="List the brackets parsed from the tax rates file."
    )
    commands.add_parser("history", parents=[ledger_only], help="List the latest ledger entry per employee.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        settings = _with_overrides(get_settings(), args)
    except ValidationError as exc:
        print("There was a problem with the configuration:", file=sys.stderr)
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ()))
            print(f"  - {location}: {error.get('msg')}", file=sys.stderr)
        return 2
    console = _get_console(args.color)
    handler = open_log_sink(settings)
    try:
        if args.command == "calc":
            return _run_calc(args, settings, console)
        if args.command == "search":
            return _run_search(args, settings, console)
        if args.command == "brackets":
            return _run_brackets(settings, console)
        if args.command == "history":
            return _run_history(settings, console)
        TaxShell(StreamInput(), settings=settings, console=console).run()
        return 0
    finally:
        close_log_sink(handler)


if __name__ == "__main__":
    raise SystemExit(main())
