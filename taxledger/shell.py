"""Interactive menu for calculating tax and searching the ledger.

All console input goes through an ``InputSource`` so a session can be
replayed from a list of answers. Output goes to a ``rich`` console when one
is supplied and to ``print`` otherwise.
"""
from __future__ import annotations

import logging
import re
import sys
from collections import deque
from pathlib import Path
from typing import Any, Callable, Iterable, Protocol, TextIO

from taxledger.config import Settings, get_settings
from taxledger.core.amounts import D, parse_amount, quantize_cents
from taxledger.core.brackets import read_brackets
from taxledger.core.evaluator import assess
from taxledger.core.models import BracketRecord, LedgerEntry
from taxledger.ledger.search import find_latest
from taxledger.ledger.storage import LEDGER_HEADER, append_entry, read_ledger
from taxledger.loading import LoadError, load_with_fallback

logger = logging.getLogger("tax_ledger").getChild("shell")

WELCOME = "Welcome to the Tax Management System"
MENU = (
    "\n_________[ MAIN MENU ]_______\n\n"
    "Please select one of the following options:\n"
    "1. Calculate Tax\n"
    "2. Search Tax\n"
    "3. Exit\n"
)
ARROW = "--> "
MENU_CHOICES = {"1": 1, "2": 2, "3": 3}

_EMPLOYEE_ID_PATTERN = re.compile(r"\s*(\d{4})\s*")


class InputSource(Protocol):
    def read_line(self) -> str:
        """Return the next line without its newline; raise ``EOFError`` when exhausted."""
        ...


class StreamInput:
    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdin

    def read_line(self) -> str:
        line = self.stream.readline()
        if line == "":
            raise EOFError
        return line.rstrip("\r\n")


class ScriptedInput:
    def __init__(self, answers: Iterable[str]) -> None:
        self._answers = deque(answers)

    def read_line(self) -> str:
        if not self._answers:
            raise EOFError
        return self._answers.popleft()

    @property
    def remaining(self) -> int:
        return len(self._answers)


def console_print(console: Any, message: str, *, end: str = "\n") -> None:
    if console is not None:
        console.print(message, end=end, markup=False, highlight=False)
    else:
        print(message, end=end, flush=True)


class TaxShell:
    def __init__(
        self,
        source: InputSource,
        *,
        settings: Settings | None = None,
        console: Any = None,
    ) -> None:
        self.source = source
        self.settings = settings or get_settings()
        self.console = console

    def _say(self, message: str) -> None:
        console_print(self.console, message)

    def _ask(self) -> str:
        console_print(self.console, ARROW, end="")
        return self.source.read_line()

    def run(self) -> None:
        self._say(WELCOME)
        try:
            while True:
                self._say(MENU)
                choice = self.prompt_choice()
                if choice == 1:
                    self.calculate_tax()
                elif choice == 2:
                    self.search_tax()
                elif self.prompt_yes_no("\n-----!!! Are you sure you want to quit?"):
                    self._say("\n===== Goodbye. =====")
                    return
        except EOFError:
            logger.info("Input closed; ending session")
            self._say("\n===== Input closed. Goodbye. =====")

    # prompts

    def prompt_choice(self) -> int:
        while True:
            self._say("Please type either 1, 2 or 3 then press Enter:")
            raw = self._ask().strip()
            if raw in MENU_CHOICES:
                return MENU_CHOICES[raw]
            if raw.isdigit() and len(raw) > 1:
                self._say("[ Invalid Input ] : Value entered has more than one number.")
            else:
                self._say("[ Invalid Input ] : The input was invalid.")

    def prompt_yes_no(self, prompt: str) -> bool:
        while True:
            self._say(prompt + "\nPlease enter either Y (for yes) or N (for No):")
            raw = self._ask().strip().lower()
            if len(raw) > 1:
                self._say("[ Invalid Input ] : Value entered has more than one letter.")
            elif raw == "y":
                return True
            elif raw == "n":
                return False
            else:
                self._say("[ Invalid Input ] : The input was invalid.")

    def prompt_employee_id(self, prompt: str) -> int:
        while True:
            self._say(prompt)
            match = _EMPLOYEE_ID_PATTERN.fullmatch(self._ask())
            if match is not None:
                return int(match.group(1))
            self._say(
                "[ Invalid Input ] : The id provided was invalid. Please make sure it is a 4 digit integer."
            )

    def prompt_income(self, employee_id: int) -> D:
        while True:
            self._say(
                f"\nPlease enter the INCOME for the employee with employee id: {employee_id:04d}"
                " to calculate tax based on income:"
            )
            try:
                return quantize_cents(parse_amount(self._ask()))
            except ValueError:
                self._say(
                    "[ Invalid Input ] : The number provided was invalid."
                    " Please check that it is a valid amount and try again."
                )

    def prompt_path(self, prompt: str, expected_name: str) -> Path:
        while True:
            self._say(
                prompt
                + "\nPlease provide full valid file path, an absolute or current working directory"
                " path may be used (Absolute recommended):"
            )
            raw = self._ask().strip()
            if not raw:
                self._say("[ Invalid File Path ] The path provided was empty.")
                continue
            candidate = Path(raw).expanduser()
            if candidate.name != expected_name:
                self._say("[ Invalid File ] The file you provided is not named correctly.")
                self._say(f"[ Invalid File ] The file should be called: {expected_name}")
                continue
            return candidate

    def _alternate_path(self, label: str, default_path: str) -> Callable[[LoadError], Path]:
        expected_name = Path(default_path).name

        def ask(error: LoadError) -> Path:
            self._say(f"[ {label} ] Issue : {label} File was not found. {error.path}")
            return self.prompt_path(
                f'\nPlease provide the {label} file. It should be called "{expected_name}"',
                expected_name,
            )

        return ask

    # menu actions

    def load_brackets(self) -> tuple[BracketRecord, ...] | None:
        path = self.settings.brackets_file
        result = load_with_fallback(read_brackets, path, self._alternate_path("Tax Rates", path))
        if result.error is not None:
            self._say(
                "[ Tax Rates ] Issue : The file could not be loaded successfully, please make sure"
                " the file contains valid tax rate information."
            )
            return None
        self._say("[ Tax Rates ] File Loaded Successfully")
        return result.value

    def load_ledger(self) -> list[LedgerEntry] | None:
        path = self.settings.ledger_file
        result = load_with_fallback(read_ledger, path, self._alternate_path("Tax Reports", path))
        if result.error is not None:
            self._say(
                "[ Tax Reports ] Issue : The file could not be loaded successfully, please make sure"
                " the file contains valid tax report information, including the corresponding headers."
                f'\n"{LEDGER_HEADER}"'
            )
            return None
        self._say("[ Tax Reports ] File Loaded Successfully")
        return result.value

    def calculate_tax(self) -> None:
        brackets = self.load_brackets()
        if brackets is None:
            return
        profile = self.settings.evaluation()
        while True:
            employee_id = self.prompt_employee_id(
                "\nPlease enter the four digit Employee ID to calculate tax based on income:"
            )
            income = self.prompt_income(employee_id)
            assessment = assess(brackets, income, match=profile.match, additive=profile.additive)
            if assessment.bracket is not None:
                self._say("\n" + assessment.bracket.describe() + "\n")
            entry = LedgerEntry(
                employee_id=employee_id,
                taxable_income=assessment.income,
                total_tax=assessment.tax,
            )
            logger.info("Computed tax %s for employee %s", entry.total_tax, entry.employee_code)
            self._say(f"\nFor Employee ID: {entry.employee_code}")
            self._say(f"With Income: ${entry.taxable_income:.2f}")
            self._say(f"The total tax is: ${entry.total_tax:.2f}")
            if append_entry(entry, self.settings.ledger_file):
                self._say("\n>[]< Record written to File.\n")
            else:
                self._say(
                    f"\n[ Tax Reports ] Issue : The record could not be written to {self.settings.ledger_file}."
                )
            if not self.prompt_yes_no("\n----!!! Calculate Tax for Another Employee?"):
                return

    def search_tax(self) -> None:
        entries = self.load_ledger()
        if entries is None:
            return
        while True:
            employee_id = self.prompt_employee_id(
                "\nPlease enter the four digit Employee ID to SEARCH for tax reports based on income:"
            )
            entry = find_latest(entries, employee_id)
            if entry is not None:
                self._say("\n <[]> The following latest result was found: ")
                self._say("\n" + entry.describe())
            else:
                self._say(f"\n <!!> The Employee ID: {employee_id:04d} was not found.")
            if not self.prompt_yes_no(
                "\n----!! Would you like to continue searching tax report records for employee Ids?"
            ):
                return


__all__ = [
    "InputSource",
    "ScriptedInput",
    "StreamInput",
    "TaxShell",
    "console_print",
]
