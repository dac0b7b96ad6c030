import json

from examgen.generation.json_extractor import extract_json, strip_code_fences


def test_fenced_array_with_surrounding_prose():
    raw = 'Here you go:\n```json\n[{"question": "What is 2+2?", "answer": "4"}]\n```\nGood luck!'
    extracted = extract_json(raw)
    assert json.loads(extracted) == [{"question": "What is 2+2?", "answer": "4"}]


def test_plain_fence_without_language_tag():
    assert extract_json('```\n[1, 2, 3]\n```') == "[1, 2, 3]"


def test_brackets_and_escaped_quotes_inside_strings_do_not_end_the_block():
    raw = 'noise [{"question": "Is \\"a]\\" valid?", "options": ["x]", "{y"]}] trailing ] junk'
    extracted = extract_json(raw)
    assert extracted == '[{"question": "Is \\"a]\\" valid?", "options": ["x]", "{y"]}]'
    assert json.loads(extracted)[0]["options"] == ["x]", "{y"]


def test_object_payload_is_returned_when_it_comes_first():
    raw = 'Result: {"questions": [1, 2]} and [3]'
    assert extract_json(raw) == '{"questions": [1, 2]}'


def test_text_without_brackets_is_returned_trimmed():
    assert extract_json("  no json here  ") == "no json here"


def test_unterminated_structure_returns_the_tail():
    raw = 'Sure: [{"question": "cut off'
    assert extract_json(raw) == '[{"question": "cut off'


def test_empty_input_gives_none():
    assert extract_json("") is None
    assert extract_json(None) is None


def test_strip_code_fences_leaves_unfenced_text_alone():
    assert strip_code_fences("  [1]  ") == "[1]"
    assert strip_code_fences("```javascript\n[1]\n```") == "[1]"
