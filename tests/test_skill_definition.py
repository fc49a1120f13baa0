"""Tests for skill definition, MIME mapping and prompt formatting."""

from enum import Enum
from typing import Any, Dict, List, Literal, TypedDict

import pytest
from pydantic import BaseModel

from skill_engine.exceptions import SkillEngineError, UnsupportedSchemaError
from skill_engine.runtime.skill import (
    RemoteServerConfig,
    define_skill,
    format_tool_description_with_tags_and_examples,
    generate_system_prompt_for_skill,
    get_input_mime_type,
)
from skill_engine.runtime.tool_runtime import ToolDefinition


class QueryInput(BaseModel):
    query: str


class QueryDict(TypedDict):
    query: str


class Color(Enum):
    RED = "red"


def _tool(name: str = "lookup") -> ToolDefinition:
    return ToolDefinition(name=name, description="Look things up", parameters=QueryInput, execute=lambda a, c: None)


def _skill(**overrides):
    params = dict(
        id="lookup",
        name="Lookup",
        description="Looks up tokens",
        tags=["tokens"],
        examples=["What is USDC?"],
        input_schema=QueryInput,
        tools=[_tool()],
    )
    params.update(overrides)
    return define_skill(**params)


class TestGetInputMimeType:
    @pytest.mark.parametrize("schema", [QueryInput, QueryDict, dict, list, Dict[str, Any], List[str]])
    def test_json_schemas(self, schema) -> None:
        assert get_input_mime_type(schema, "s") == "application/json"

    def test_string_schema(self) -> None:
        assert get_input_mime_type(str, "s") == "text/plain"

    @pytest.mark.parametrize("schema,type_name", [(bool, "bool"), (int, "int"), (float, "float"), (Color, "Color")])
    def test_unsupported_schemas(self, schema, type_name) -> None:
        """Scalar and enum schemas are rejected with the skill name."""
        with pytest.raises(UnsupportedSchemaError) as exc_info:
            get_input_mime_type(schema, "Lookup")

        assert exc_info.value.message == f'Skill "Lookup": {type_name} not supported'

    def test_literal_is_unsupported(self) -> None:
        with pytest.raises(UnsupportedSchemaError):
            get_input_mime_type(Literal["a", "b"], "Lookup")


class TestDefineSkill:
    def test_builds_definition(self) -> None:
        skill = _skill(remote_servers=[RemoteServerConfig(name="ember", command="node", args=("server.js",))])

        assert skill.id == "lookup"
        assert skill.tags == ("tokens",)
        assert skill.tools[0].name == "lookup"
        assert skill.input_mime_type == "application/json"
        assert skill.remote_servers[0].name == "ember"
        assert skill.handler is None

    @pytest.mark.parametrize(
        "overrides,fragment",
        [
            ({"id": ""}, "non-empty id"),
            ({"id": "   "}, "non-empty id"),
            ({"tags": []}, "at least one tag"),
            ({"examples": []}, "at least one example"),
            ({"tools": []}, "at least one tool"),
            ({"tools": [_tool("a"), _tool("a")]}, "duplicate tools: a"),
        ],
    )
    def test_rejects_incomplete_definitions(self, overrides, fragment) -> None:
        """Skills need an id, tags, examples and tools."""
        with pytest.raises(SkillEngineError) as exc_info:
            _skill(**overrides)

        assert exc_info.value.name == "InvalidRequestError"
        assert fragment in exc_info.value.message

    def test_rejects_unsupported_schema(self) -> None:
        with pytest.raises(UnsupportedSchemaError):
            _skill(input_schema=bool)

    def test_validate_input(self) -> None:
        skill = _skill()

        assert skill.validate_input({"query": "USDC"}) == QueryInput(query="USDC")

    def test_validate_input_error(self) -> None:
        with pytest.raises(SkillEngineError) as exc_info:
            _skill().validate_input({})

        assert exc_info.value.name == "InputValidationError"
        assert exc_info.value.message.startswith("Invalid arguments for skill Lookup:")
        assert "query" in exc_info.value.message


def test_format_tool_description_escapes_values() -> None:
    """Tags and examples are XML-escaped in the tool description."""
    text = format_tool_description_with_tags_and_examples(
        "Borrow tokens", ["lending", "a<b"], ['Borrow 5 "USDC"', "Tom & Jerry"]
    )

    assert text == (
        "Borrow tokens\n\n"
        "<tags><tag>lending</tag><tag>a&lt;b</tag></tags>\n"
        "<examples><example>Borrow 5 &quot;USDC&quot;</example><example>Tom &amp; Jerry</example></examples>"
    )


def test_generate_system_prompt_for_skill() -> None:
    skill = _skill(examples=["What is USDC?", "Find WETH"], tags=["tokens", "lookup"])

    prompt = generate_system_prompt_for_skill(skill, "Be brief.")

    assert prompt.startswith('You are fulfilling the "Lookup" skill.')
    assert "Tags: tokens, lookup" in prompt
    assert "<example1>\nUser: What is USDC?\nExpected behavior: Looks up tokens\n</example1>" in prompt
    assert "<example2>" in prompt
    assert prompt.endswith("Be brief.")


def test_generate_system_prompt_without_base_prompt_is_trimmed() -> None:
    assert generate_system_prompt_for_skill(_skill()).endswith("</example1>")
