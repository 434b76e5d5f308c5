import pytest

from pagegen.exceptions import ParseError
from pagegen.utils.page_json import extract_object_span, parse_page_json, strip_code_fence


FENCED = (
    ' ```json\n{"type":"solution_brief","title":"A Solution For Brewers Everywhere",'
    '"description":"This page demonstrates a concrete example that meets the fifty character minimum easily.",'
    '"sections":[{"type":"hero","headline":"Solve Your Distribution Challenges Today"}]}\n``` '
)


def test_parses_fenced_response():
    doc = parse_page_json(FENCED)
    assert doc["type"] == "solution_brief"
    assert doc["sections"][0]["headline"] == "Solve Your Distribution Challenges Today"


def test_parses_bare_fence_and_surrounding_prose():
    assert parse_page_json('```\n{"a": 1}\n```') == {"a": 1}
    assert parse_page_json('Here is the page:\n{"a": {"b": 2}}\nHope it helps!') == {"a": {"b": 2}}


def test_strip_code_fence_leaves_plain_text():
    assert strip_code_fence('  {"a": 1}  ') == '{"a": 1}'
    assert strip_code_fence('```JSON\n{"a": 1}```') == '{"a": 1}'


def test_extract_object_span_uses_outer_braces():
    assert extract_object_span('x {"a": {"b": 1}} y') == '{"a": {"b": 1}}'
    assert extract_object_span("no braces") is None
    assert extract_object_span("} backwards {") is None


def test_trailing_text_after_object():
    assert parse_page_json('{"a": 1}\n\nLet me know if you need changes.') == {"a": 1}


@pytest.mark.parametrize(
    "raw, message",
    [
        ("", "empty"),
        ("   ", "empty"),
        ("Sorry, I cannot help with that.", "No JSON object"),
        ('{"a": 1,}', "Invalid JSON"),
    ],
)
def test_parse_failures(raw, message):
    with pytest.raises(ParseError) as excinfo:
        parse_page_json(raw)
    assert message.lower() in str(excinfo.value).lower()
    assert excinfo.value.error_type == "parse"


def test_non_object_json_is_rejected():
    with pytest.raises(ParseError):
        parse_page_json("[1, 2, 3]")
