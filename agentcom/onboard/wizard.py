"""Onboarding flow: collect answers, validate them, apply them."""

from __future__ import annotations

from typing import Protocol

from agentcom.onboard.result import ApplyReport, OnboardResult


class AbortedError(Exception):
    """Raised when the user cancels the onboarding flow."""

    def __init__(self, message: str = "onboard: aborted") -> None:
        super().__init__(message)


class WizardError(RuntimeError):
    """Raised when a step of the onboarding flow fails."""


class Prompter(Protocol):
    """Collects onboarding answers from the user."""

    def run(self, defaults: OnboardResult) -> OnboardResult: ...


class Applier(Protocol):
    """Materialises an onboarding result into files and local state."""

    def apply(self, result: OnboardResult) -> ApplyReport: ...


class Wizard:
    """Runs a prompter, validates its answers and hands them to an applier."""

    def __init__(self, prompter: Prompter, applier: Applier) -> None:
        self._prompter = prompter
        self._applier = applier

    def run(self, defaults: OnboardResult) -> ApplyReport:
        """Execute the flow; a user abort propagates as AbortedError."""
        try:
            result = self._prompter.run(defaults)
        except AbortedError:
            raise
        except Exception as exc:
            raise WizardError(f"prompt: {exc}") from exc

        try:
            result.validate()
        except Exception as exc:
            raise WizardError(f"validate: {exc}") from exc

        try:
            return self._applier.apply(result)
        except Exception as exc:
            raise WizardError(f"apply: {exc}") from exc