import json

import pytest

from jsonsalvage.repair.structure import (
    balance_brackets,
    close_unterminated_string,
    count_unescaped_quotes,
    remove_trailing_commas,
    repair_json_structure,
)


@pytest.mark.unit
class TestTrailingCommas:
    """Test trailing comma removal"""

    def test_before_closing_brace(self):
        assert remove_trailing_commas('{"a": 1, "b": 2,}') == '{"a": 1, "b": 2}'

    def test_before_closing_bracket_with_whitespace(self):
        fixed = remove_trailing_commas('{"a": [1, 2, ], }')
        assert json.loads(fixed) == {"a": [1, 2]}

    def test_inner_commas_untouched(self):
        text = '{"a": [1, 2], "b": 3}'
        assert remove_trailing_commas(text) == text


@pytest.mark.unit
class TestQuoteBalancing:
    """Test parity-based quote closing"""

    def test_count_ignores_escaped_quotes(self):
        assert count_unescaped_quotes('"a\\"b"') == 2

    def test_even_count_unchanged(self):
        text = '{"a": "b"}'
        assert close_unterminated_string(text) == text

    def test_closes_before_trailing_brace(self):
        """Should insert the quote before the final closing sequence"""
        assert close_unterminated_string('{"a": "abc}') == '{"a": "abc"}'

    def test_closes_before_nested_closers(self):
        assert close_unterminated_string('{"a": {"b": "x}}') == '{"a": {"b": "x"}}'

    def test_appends_when_no_closers(self):
        assert close_unterminated_string('{"a": "abc') == '{"a": "abc"'


@pytest.mark.unit
class TestBracketBalancing:
    """Test count-based bracket and brace balancing"""

    def test_missing_bracket_goes_before_brace(self):
        assert balance_brackets('{"a": [1, 2}') == '{"a": [1, 2]}'

    def test_missing_bracket_goes_before_whole_brace_run(self):
        assert balance_brackets('{"a": {"b": [1}}') == '{"a": {"b": [1]}}'

    def test_missing_brace_appended(self):
        assert balance_brackets('{"a": 1, "b": {"c": 2}') == '{"a": 1, "b": {"c": 2}}'

    def test_missing_both(self):
        assert balance_brackets('{"a": [1, [2]') == '{"a": [1, [2]]}'

    def test_brackets_inside_strings_are_counted(self):
        """Should count every bracket, including ones inside string values"""
        assert balance_brackets('{"a": "[x", "b": 1}') == '{"a": "[x", "b": 1]}'

    def test_balanced_brackets_inside_strings_unchanged(self):
        text = '{"a": "[not a list] {ok}"}'
        assert balance_brackets(text) == text

    def test_balanced_text_unchanged(self):
        text = '{"a": [1, {"b": 2}]}'
        assert balance_brackets(text) == text


@pytest.mark.unit
class TestRepairJsonStructure:
    """Test the combined structural repair stage"""

    def test_trailing_comma_then_balance(self):
        """Trailing comma removal should run before brackets are counted"""
        fixed = repair_json_structure('{"items": [1, 2,}')
        assert json.loads(fixed) == {"items": [1, 2]}

    def test_truncated_string_value(self):
        fixed = repair_json_structure('{"a": 1, "b": "trunc')
        assert json.loads(fixed) == {"a": 1, "b": "trunc"}

    def test_truncated_array_in_object(self):
        fixed = repair_json_structure('{"tracks": ["Intro", "Outro"')
        assert json.loads(fixed) == {"tracks": ["Intro", "Outro"]}

    def test_valid_json_unchanged(self):
        text = '{"a": [1, {"b": "c"}], "d": null}'
        assert repair_json_structure(text) == text
