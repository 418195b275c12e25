"""Tests for prompt template placeholder rendering."""

import pytest

from cortexmix.cognition.prompts import DEFAULT_PROMPTS, PromptLibrary, PromptTemplate


def test_render_replaces_placeholders_in_both_halves():
    template = PromptTemplate(name="t", system="Agent {{name}}", user="Hello {{name}}, at {{place}}")

    rendered = template.render(name="Ada", place="the desk")

    assert rendered.system == "Agent Ada"
    assert rendered.user == "Hello Ada, at the desk"


def test_unknown_placeholders_are_left_alone():
    rendered = PromptTemplate(name="t", system="", user="{{missing}} stays").render(other="x")
    assert rendered.user == "{{missing}} stays"


def test_decide_template_keeps_json_braces():
    rendered = DEFAULT_PROMPTS.get("decide").render(
        position="{x: 0.0, y: 0.0, z: 0.0}", behavior="IDLE", context="## GOALS\nNo active goals."
    )

    assert '"action": "MOVE_TO"' in rendered.system
    assert "**Behavior**: IDLE" in rendered.user
    assert "{{" not in rendered.user


def test_library_lookup():
    library = PromptLibrary()
    library.register(PromptTemplate(name="greet", system="s", user="u"))

    assert library.get("greet").user == "u"
    with pytest.raises(KeyError):
        library.get("missing")
    assert "consolidate" in DEFAULT_PROMPTS.templates
