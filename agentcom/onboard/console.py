"""Interactive onboarding prompts on plain text streams."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from typing import TextIO

from agentcom.onboard.result import OnboardResult
from agentcom.onboard.wizard import AbortedError

_TEMPLATES = (
    ("None", "none"),
    ("Company", "company"),
    ("Oh-My-OpenCode", "oh-my-opencode"),
)


def _validate_home(value: str) -> str | None:
    if not value.strip():
        return "home directory is required"
    if not os.path.isabs(value):
        return "home directory must be an absolute path"
    return None


class ConsolePrompter:
    """Asks the onboarding questions line by line."""

    def __init__(
        self,
        accessible: bool = False,
        input: TextIO | None = None,
        output: TextIO | None = None,
    ) -> None:
        self._accessible = accessible
        self._input = input if input is not None else sys.stdin
        self._output = output if output is not None else sys.stdout

    def run(self, defaults: OnboardResult) -> OnboardResult:
        """Show the wizard and return the collected answers."""
        try:
            return self._run(defaults)
        except KeyboardInterrupt:
            raise AbortedError() from None

    def _run(self, defaults: OnboardResult) -> OnboardResult:
        self._heading("Step 1: Environment")
        self._write(
            "agentcom setup\n"
            "Prepare your local agentcom home and optional project scaffold.\n"
        )
        home_dir = self._ask_text("Agentcom home directory", defaults.home_dir, _validate_home)
        project = self._ask_text("Project name", defaults.project).strip()

        self._heading("Step 2: Project scaffold")
        template = self._ask_choice("Project template", defaults.template or "none")
        write_agents_md = self._ask_confirm(
            "Generate project AGENTS.md in the current directory?",
            "Yes",
            "No",
            defaults.write_agents_md,
        )

        self._heading("Step 3: Confirm")
        self._write("Review selections\n")
        self._write(
            f"home: {home_dir}\n"
            f"project: {project or '(legacy)'}\n"
            f"template: {template}\n"
            f"write AGENTS.md: {'yes' if write_agents_md else 'no'}\n"
        )
        confirmed = self._ask_confirm(
            "Apply these settings?", "Apply", "Cancel", defaults.confirmed
        )

        return OnboardResult(
            home_dir=home_dir,
            project=project,
            template="" if template == "none" else template,
            write_agents_md=write_agents_md,
            confirmed=confirmed,
        )

    def _write(self, text: str) -> None:
        self._output.write(text)
        self._output.flush()

    def _heading(self, title: str) -> None:
        self._write(f"\n{title}\n")
        if not self._accessible:
            self._write("-" * len(title) + "\n")

    def _read_line(self) -> str:
        line = self._input.readline()
        if not line:
            raise AbortedError()
        return line.rstrip("\r\n")

    def _ask_text(
        self,
        title: str,
        default: str,
        validate: Callable[[str], str | None] | None = None,
    ) -> str:
        while True:
            hint = f" [{default}]" if default else ""
            self._write(f"{title}{hint}: ")
            value = self._read_line()
            if not value.strip():
                value = default
            problem = validate(value) if validate else None
            if problem is None:
                return value
            self._write(f"error: {problem}\n")

    def _ask_choice(self, title: str, default: str) -> str:
        self._write(f"{title}\n")
        for number, (label, value) in enumerate(_TEMPLATES, start=1):
            self._write(f"  {number}) {label} ({value})\n")
        while True:
            self._write(f"Choose [{default}]: ")
            answer = self._read_line().strip().lower()
            if not answer:
                return default
            for number, (label, value) in enumerate(_TEMPLATES, start=1):
                if answer in (str(number), value, label.lower()):
                    return value
            choices = ", ".join(value for _, value in _TEMPLATES)
            self._write(f"error: choose one of {choices}\n")

    def _ask_confirm(self, title: str, yes: str, no: str, default: bool) -> bool:
        yes_words = {"y", "yes", yes.lower()}
        no_words = {"n", "no", no.lower()}
        shown = yes if default else no
        while True:
            self._write(f"{title} ({yes}/{no}) [{shown}]: ")
            answer = self._read_line().strip().lower()
            if not answer:
                return default
            if answer in yes_words:
                return True
            if answer in no_words:
                return False
            self._write(f"error: answer {yes} or {no}\n")