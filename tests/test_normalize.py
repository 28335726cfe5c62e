import pytest

from server.normalize import normalize


def test_plain_json():
    result = normalize('{"description":"a","recommendations":"b"}')
    assert result.description == "a"
    assert result.recommendations == "b"


def test_fenced_json_inside_prose():
    raw = 'Here you go:\n```json\n{"description":"a","recommendations":"b"}\n```'
    result = normalize(raw)
    assert (result.description, result.recommendations) == ("a", "b")


def test_no_json_uses_text_as_description():
    result = normalize("no json here")
    assert result.description == "no json here"
    assert result.recommendations == ""


def test_empty_input():
    result = normalize("")
    assert result.description == ""
    assert result.recommendations == ""


def test_non_string_values_are_coerced():
    result = normalize('{"description":123,"recommendations":null}')
    assert result.description == "123"
    assert result.recommendations == ""


def test_boolean_and_float_values():
    result = normalize('{"description":true,"recommendations":2.5}')
    assert result.description == "true"
    assert result.recommendations == "2.5"


def test_missing_keys_become_empty():
    result = normalize('{"caption":"x"}')
    assert result.description == ""
    assert result.recommendations == ""


def test_nested_object_uses_widest_span():
    raw = 'Result: {"description":"plate","recommendations":"bread","meta":{"n":1}} done'
    result = normalize(raw)
    assert result.description == "plate"
    assert result.recommendations == "bread"


def test_two_objects_over_capture_falls_back_to_raw_text():
    raw = 'first {"description":"a"} and second {"recommendations":"b"}'
    result = normalize(raw)
    assert result.description == raw
    assert result.recommendations == ""


def test_malformed_json_falls_back_to_raw_text():
    raw = '{"description": "a", "recommendations": '
    result = normalize(raw)
    assert result.description == raw
    assert result.recommendations == ""


def test_top_level_array_is_not_an_object():
    raw = '["description", "recommendations"]'
    assert normalize(raw).description == raw


@pytest.mark.parametrize(
    "raw",
    ["", "}{", "{", "null", "42", '"text"', "{}", '{"description": [1, 2]}', "```json\n{bad}\n```"],
)
def test_always_returns_two_strings(raw):
    result = normalize(raw)
    assert isinstance(result.description, str)
    assert isinstance(result.recommendations, str)


def test_list_value_rendered_as_json():
    result = normalize('{"description":"x","recommendations":["pan","queso"]}')
    assert result.recommendations == '["pan", "queso"]'
