import json

from pagerduty_notes.services.notes.escaper import escape_json_content


def test_escapes_in_order_without_double_escaping():
    assert escape_json_content('a\\b "c"\nd\re\tf') == 'a\\\\b \\"c\\"\\nd\\re\\tf'
    assert escape_json_content("\\n") == "\\\\n"


def test_empty_input_returns_empty_string():
    assert escape_json_content(None) == ""
    assert escape_json_content("") == ""


def test_body_decodes_back_to_original_note():
    note = 'Job "infra\\Deploy" has FAILED\n\n\tpath: C:\\tmp\r\nquote: "x"\x01'

    body = f'{{"note": {{"content": "{escape_json_content(note)}"}}}}'

    assert json.loads(body)["note"]["content"] == note


def test_non_ascii_text_is_left_alone():
    assert escape_json_content("部署完成 ✅") == "部署完成 ✅"
