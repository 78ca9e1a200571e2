import pytest

from agentcom.onboard.result import (
    ApplyReport,
    OnboardResult,
    TemplateDefinition,
    TemplateRole,
    ValidationError,
)


@pytest.mark.parametrize(
    "result",
    [
        OnboardResult(home_dir="/tmp/agentcom", confirmed=True),
        OnboardResult(home_dir="/tmp/agentcom", template="company", confirmed=True),
        OnboardResult(home_dir="/tmp/agentcom", template="oh-my-opencode", confirmed=True),
        OnboardResult(
            home_dir="/tmp/agentcom",
            write_instructions=True,
            selected_agents=["codex"],
            confirmed=True,
        ),
    ],
    ids=[
        "valid without template",
        "valid company template",
        "valid oh-my-opencode template",
        "valid instructions with agent",
    ],
)
def test_validate_accepts(result):
    assert result.validate() is None


@pytest.mark.parametrize(
    "result, message",
    [
        (OnboardResult(confirmed=True), "home directory is required"),
        (
            OnboardResult(home_dir="relative/path", confirmed=True),
            "home directory must be an absolute path",
        ),
        (
            OnboardResult(home_dir="/tmp/agentcom", write_instructions=True, confirmed=True),
            "at least one selected agent",
        ),
        (OnboardResult(home_dir="/tmp/agentcom"), "onboarding not confirmed"),
    ],
    ids=[
        "missing home",
        "relative home",
        "missing selected agents for instructions",
        "not confirmed",
    ],
)
def test_validate_rejects(result, message):
    with pytest.raises(ValidationError, match=message):
        result.validate()


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        OnboardResult().validate()


def test_apply_report_to_dict_omits_empty_optional_fields():
    report = ApplyReport(
        home_dir="/tmp/agentcom", db_path="/tmp/agentcom/agentcom.db", status="initialized"
    )
    assert report.to_dict() == {
        "home_dir": "/tmp/agentcom",
        "db_path": "/tmp/agentcom/agentcom.db",
        "status": "initialized",
    }


def test_apply_report_to_dict_includes_set_fields():
    report = ApplyReport(
        home_dir="/h",
        db_path="/h/db",
        status="initialized",
        project="alpha",
        agents_md_path="/work/AGENTS.md",
        generated_files=["/work/a.md", "/work/b.md"],
    )
    doc = report.to_dict()
    assert doc["project"] == "alpha"
    assert doc["agents_md"] == "/work/AGENTS.md"
    assert doc["generated_files"] == ["/work/a.md", "/work/b.md"]
    assert "template" not in doc
    assert "memory_files" not in doc


def test_apply_report_to_dict_keeps_required_keys_when_empty():
    assert ApplyReport().to_dict() == {"home_dir": "", "db_path": "", "status": ""}


def test_template_definition_holds_roles():
    role = TemplateRole(name="lead", communicates_with=["dev"], responsibilities=["plan"])
    definition = TemplateDefinition(name="custom", roles=[role])
    result = OnboardResult(home_dir="/tmp/agentcom", custom_template=definition, confirmed=True)
    result.validate()
    assert result.custom_template.roles[0].communicates_with == ["dev"]
    assert TemplateRole().responsibilities == []