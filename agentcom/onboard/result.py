"""Onboarding selections, template definitions and the apply report."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


class ValidationError(ValueError):
    """Raised when onboarding selections cannot be applied."""


@dataclass
class TemplateRole:
    """One role inside a project template."""

    name: str = ""
    description: str = ""
    agent_name: str = ""
    agent_type: str = ""
    communicates_with: list[str] = field(default_factory=list)
    responsibilities: list[str] = field(default_factory=list)


@dataclass
class TemplateDefinition:
    """A user-defined project template."""

    name: str = ""
    description: str = ""
    reference: str = ""
    common_title: str = ""
    common_body: str = ""
    roles: list[TemplateRole] = field(default_factory=list)


@dataclass
class OnboardResult:
    """The selections made during onboarding."""

    home_dir: str = ""
    project: str = ""
    template: str = ""
    write_agents_md: bool = False
    selected_agents: list[str] = field(default_factory=list)
    write_memory: bool = False
    write_instructions: bool = False
    custom_template: TemplateDefinition | None = None
    confirmed: bool = False

    def validate(self) -> None:
        """Raise ValidationError unless the result can be applied safely."""
        if not self.home_dir:
            raise ValidationError("home directory is required")
        if not os.path.isabs(self.home_dir):
            raise ValidationError("home directory must be an absolute path")
        if self.write_instructions and not self.selected_agents:
            raise ValidationError(
                "at least one selected agent is required when writing instructions"
            )
        if not self.confirmed:
            raise ValidationError("onboarding not confirmed")


@dataclass
class ApplyReport:
    """The filesystem changes produced by onboarding."""

    home_dir: str = ""
    db_path: str = ""
    status: str = ""
    project: str = ""
    project_config_path: str = ""
    template: str = ""
    agents_md_path: str = ""
    instruction_files: list[str] = field(default_factory=list)
    memory_files: list[str] = field(default_factory=list)
    custom_template_path: str = ""
    generated_files: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Return a JSON-ready mapping; empty optional fields are left out."""
        doc: dict = {
            "home_dir": self.home_dir,
            "db_path": self.db_path,
            "status": self.status,
        }
        optional = (
            ("project", self.project),
            ("project_config_path", self.project_config_path),
            ("template", self.template),
            ("agents_md", self.agents_md_path),
            ("instruction_files", list(self.instruction_files)),
            ("memory_files", list(self.memory_files)),
            ("custom_template_path", self.custom_template_path),
            ("generated_files", list(self.generated_files)),
        )
        doc.update((key, value) for key, value in optional if value)
        return doc