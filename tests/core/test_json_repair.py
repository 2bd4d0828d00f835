"""
Test suite for ResponseRepairer and its helpers.

Covers the repair ladder from well-formed JSON down to regex fragment
extraction, and the truncation scanner.

System role: Verification of the response repair stage
"""

import json

import pytest

from pagecraft.core.exceptions import ResponseRepairError
from pagecraft.core.pipeline.json_repair import (
    ResponseRepairer,
    escape_control_characters,
    extract_fragments,
    first_object,
    strip_code_fences,
    truncation_candidates,
)
from pagecraft.models.results import RefinementResult, TypesettingResult


@pytest.fixture
def repairer() -> ResponseRepairer:
    return ResponseRepairer()


class TestRepairLadder:
    """Test suite for ResponseRepairer.repair."""

    def test_well_formed_json_should_parse_as_is(self, repairer, typesetting_json) -> None:
        # Act
        result = repairer.repair(typesetting_json, TypesettingResult)

        # Assert
        assert result.strategy == "as_is"
        assert result.partial is False
        assert result.value == TypesettingResult.model_validate(json.loads(typesetting_json))

    def test_should_strip_code_fences(self, repairer, typesetting_json) -> None:
        raw = f"```json\n{typesetting_json}\n```"

        result = repairer.repair(raw, TypesettingResult)

        assert result.strategy == "strip_fences"
        assert result.value.formatted_content == "<h1>Title</h1><p>Body</p>"

    def test_should_extract_object_from_surrounding_prose(self, repairer, typesetting_json) -> None:
        raw = f"Here is the formatted document: {typesetting_json} Let me know if you need more."

        result = repairer.repair(raw, TypesettingResult)

        assert result.strategy == "extract_object"
        assert result.value.styling.layout == "Single column"

    def test_should_extract_first_object_when_prose_has_braces(self, repairer, typesetting_json) -> None:
        raw = f"Here: {typesetting_json} Tell me if {{anything}} changes."

        result = repairer.repair(raw, TypesettingResult)

        assert result.strategy == "extract_object"
        assert result.partial is False
        assert result.value.styling.css == "body { margin: 0; }"

    def test_truncated_string_should_recover_content(self, repairer) -> None:
        # Arrange
        raw = '{"content": "<p>Hi</'

        # Act
        result = repairer.repair(raw, TypesettingResult)

        # Assert
        assert result.partial is True
        assert result.value.formatted_content.startswith("<p>Hi")

    def test_truncated_array_should_keep_complete_items(self, repairer) -> None:
        raw = '{"formattedContent": "<p>x</p>", "suggestions": ["first", "sec'

        result = repairer.repair(raw, TypesettingResult)

        assert result.strategy == "truncation"
        assert result.value.formatted_content == "<p>x</p>"
        assert result.value.suggestions[0] == "first"

    def test_raw_newlines_inside_strings_should_be_escaped(self, repairer) -> None:
        raw = '{"formattedContent": "<p>line one\nline two</p>", "suggestions": []}'

        result = repairer.repair(raw, TypesettingResult)

        assert result.strategy == "escape_controls"
        assert result.value.formatted_content == "<p>line one\nline two</p>"

    def test_stray_backslash_before_u_should_be_escaped(self, repairer) -> None:
        # Arrange
        raw = (
            '{"formattedContent": "<p>Saved in C:\\users\\docs</p>", '
            '"styling": {"css": "h1{color:red}", "layout": "Two column"}, "suggestions": ["keep"]}'
        )

        # Act
        result = repairer.repair(raw, TypesettingResult)

        # Assert
        assert result.strategy == "escape_controls"
        assert result.partial is False
        assert result.value.formatted_content == "<p>Saved in C:\\users\\docs</p>"
        assert result.value.styling.css == "h1{color:red}"

    def test_should_fall_back_to_fragments(self, repairer) -> None:
        raw = '{"formattedContent": "<p>ok</p>" "styling": {'

        result = repairer.repair(raw, TypesettingResult)

        assert result.strategy == "fragments"
        assert result.partial is True
        assert result.value.formatted_content == "<p>ok</p>"

    def test_should_accept_legacy_keys(self, repairer) -> None:
        raw = json.dumps({"content": "<p>a</p>", "css": "p {}", "changes": ["tightened spacing"]})

        result = repairer.repair(raw, RefinementResult)

        assert result.value.refined_content == "<p>a</p>"
        assert result.value.refined_css == "p {}"
        assert result.value.changes == ["tightened spacing"]

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_empty_response_should_raise(self, repairer, raw) -> None:
        with pytest.raises(ResponseRepairError):
            repairer.repair(raw, TypesettingResult)

    def test_unrecoverable_response_should_raise(self, repairer) -> None:
        with pytest.raises(ResponseRepairError) as exc_info:
            repairer.repair("I am sorry, I cannot format this document.", TypesettingResult)

        assert "TypesettingResult" in exc_info.value.message
        assert exc_info.value.details["response_preview"].startswith("I am sorry")

    def test_truncation_at_any_offset_should_only_raise_repair_error(self, repairer, typesetting_json) -> None:
        # Arrange
        recovered = 0

        # Act
        for offset in range(len(typesetting_json) + 1):
            try:
                result = repairer.repair(typesetting_json[:offset], TypesettingResult)
            except ResponseRepairError:
                continue
            recovered += 1
            assert isinstance(result.value, TypesettingResult)

        # Assert
        assert recovered > 0


class TestRepairHelpers:
    """Test suite for the repair helper functions."""

    def test_strip_code_fences(self) -> None:
        assert strip_code_fences('```JSON\n{"a": 1}\n```') == '{"a": 1}'

    def test_escape_control_characters_should_escape_only_inside_strings(self) -> None:
        escaped = escape_control_characters('{\n"a": "x\ty"\n}')

        assert escaped == '{\n"a": "x\\ty"\n}'
        assert json.loads(escaped) == {"a": "x\ty"}

    def test_escape_control_characters_should_double_stray_backslashes(self) -> None:
        escaped = escape_control_characters(r'{"path": "C:\docs"}')

        assert json.loads(escaped) == {"path": "C:\\docs"}

    def test_escape_control_characters_should_keep_unicode_escapes(self) -> None:
        escaped = escape_control_characters(r'{"a": "caf\u00e9 \u12"}')

        assert json.loads(escaped) == {"a": "caf\u00e9 \\u12"}

    def test_first_object_should_stop_at_balanced_close(self) -> None:
        assert first_object('note {"a": {"b": "}"}} then {x}') == '{"a": {"b": "}"}}'
        assert first_object('{"a": 1') is None
        assert first_object("no braces") is None

    def test_truncation_candidates_should_cut_back_to_last_member(self) -> None:
        candidates = truncation_candidates('{"a": 1, "b": ')

        assert json.loads(candidates[-1]) == {"a": 1}

    def test_truncation_candidates_should_drop_trailing_chatter(self) -> None:
        assert truncation_candidates('{"a": 1} and some notes') == ['{"a": 1}']

    def test_truncation_candidates_should_close_nested_containers(self) -> None:
        candidates = truncation_candidates('{"styling": {"css": "body {')

        assert json.loads(candidates[0]) == {"styling": {"css": "body {"}}

    def test_extract_fragments_should_find_nested_fields(self) -> None:
        raw = '{"formattedContent": "<p>a</p>", "styling": {"css": "p { margin: 0; }", "layout": "Gri'

        fragments = extract_fragments(raw, TypesettingResult)

        assert fragments["formatted_content"] == "<p>a</p>"
        assert fragments["styling"]["css"] == "p { margin: 0; }"
