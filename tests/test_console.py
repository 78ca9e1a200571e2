import io

import pytest

from agentcom.onboard.console import ConsolePrompter
from agentcom.onboard.result import OnboardResult
from agentcom.onboard.wizard import AbortedError


def _run(text, defaults=None, accessible=False):
    out = io.StringIO()
    prompter = ConsolePrompter(accessible, io.StringIO(text), out)
    result = prompter.run(defaults or OnboardResult(home_dir="/tmp/agentcom"))
    return result, out.getvalue()


def test_empty_answers_keep_defaults():
    result, _ = _run("\n\n\n\n\n")
    assert result.home_dir == "/tmp/agentcom"
    assert result.project == ""
    assert result.template == ""
    assert result.write_agents_md is False
    assert result.confirmed is False


def test_custom_answers():
    result, output = _run("/srv/agentcom\n  alpha  \ncompany\ny\ny\n")
    assert result.home_dir == "/srv/agentcom"
    assert result.project == "alpha"
    assert result.template == "company"
    assert result.write_agents_md is True
    assert result.confirmed is True
    assert "project: alpha" in output
    assert "template: company" in output
    assert "write AGENTS.md: yes" in output


def test_template_by_number():
    result, _ = _run("\n\n3\n\n\n")
    assert result.template == "oh-my-opencode"


def test_default_template_is_kept():
    defaults = OnboardResult(home_dir="/tmp/agentcom", template="company")
    result, _ = _run("\n\n\n\n\n", defaults)
    assert result.template == "company"


def test_invalid_template_is_asked_again():
    result, _ = _run("\n\nbogus\ncompany\n\n\n")
    assert result.template == "company"


def test_relative_home_is_asked_again():
    result, output = _run("relative/path\n/tmp/other\n\n\n\n\n")
    assert result.home_dir == "/tmp/other"
    assert "home directory must be an absolute path" in output


def test_missing_home_is_asked_again():
    result, output = _run("\n/tmp/other\n\n\n\n\n", OnboardResult())
    assert result.home_dir == "/tmp/other"
    assert "home directory is required" in output


def test_summary_shows_legacy_project():
    result, output = _run("\n\n\n\n\n")
    assert "project: (legacy)" in output
    assert "template: none" in output
    assert result.project == ""


def test_apply_and_cancel_words():
    applied, _ = _run("\n\n\nno\napply\n")
    cancelled, _ = _run("\n\n\nno\ncancel\n", OnboardResult(home_dir="/tmp/agentcom", confirmed=True))
    assert applied.confirmed is True
    assert cancelled.confirmed is False


def test_end_of_input_aborts():
    with pytest.raises(AbortedError):
        _run("/tmp/agentcom\n")


def test_accessible_mode_collects_same_answers():
    result, _ = _run("\n\ncompany\ny\ny\n", accessible=True)
    assert result.template == "company"
    assert result.confirmed is True