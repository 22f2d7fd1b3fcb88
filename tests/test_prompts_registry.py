from pathlib import Path

import pytest

from adviser.prompts.registry import PromptNotFound, PromptRegistry


def test_builtin_personas_are_listed():
    assert PromptRegistry().personas() == ["code-verification", "design-review", "plan-analysis"]


@pytest.mark.parametrize("name", ["code-verification", "design-review", "plan-analysis"])
def test_builtin_personas_ask_for_the_json_contract(name):
    prompt = PromptRegistry().persona_prompt(name)

    for key in ("summary", "issues", "suggestions", "severity"):
        assert key in prompt


@pytest.mark.parametrize("name", ["code-verification", "design-review", "plan-analysis"])
def test_persona_severity_list_comes_from_the_enum(name):
    prompt = PromptRegistry().persona_prompt(name)

    assert "severity is one of critical, high, medium, low;" in prompt
    assert "{{" not in prompt


def test_unknown_persona():
    with pytest.raises(PromptNotFound, match="Unknown persona"):
        PromptRegistry().persona_prompt("poet")


def test_render_substitutes_variables(tmp_path: Path):
    (tmp_path / "greeting.yaml").write_text(
        "id: greeting.v1\ntemplate: 'Review {{ target }} carefully.'\n",
        encoding="utf-8",
    )

    assert PromptRegistry(tmp_path).render("greeting.yaml", target="the plan") == "Review the plan carefully."


def test_missing_template(tmp_path: Path):
    (tmp_path / "empty.yaml").write_text("id: empty.v1\n", encoding="utf-8")

    with pytest.raises(ValueError):
        PromptRegistry(tmp_path).render("empty.yaml")


def test_missing_file(tmp_path: Path):
    with pytest.raises(PromptNotFound):
        PromptRegistry(tmp_path).load("nope.yaml")
