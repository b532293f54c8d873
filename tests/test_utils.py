import json

import pytest

from models import Question, QuestionOption, QuestionType
from utils import load_questions, pack_answers, save_questions, split_answers, to_half_width


def test_to_half_width_letters_and_punctuation():
    assert to_half_width("ＡＢｃ１．") == "ABc1."
    assert to_half_width("中文A") == "中文A"


@pytest.mark.parametrize("raw, expected", [
    ("巴黎;;你好;伦敦", ["巴黎;你好", "伦敦"]),
    ("a;;;b", ["a;", "b"]),
    ("北京;", ["北京"]),
    ("(1) .;(2) #", [".", "#"]),
    ("（1）北京; （2）上海", ["北京", "上海"]),
    ("", []),
    (" ; ", []),
    ("北京；上海", ["北京", "上海"]),
    ("（1）北京；（2）沪", ["北京", "沪"]),
    ("a；；b；c", ["a；b", "c"]),
])
def test_split_answers(raw, expected):
    assert split_answers(raw) == expected


def test_pack_answers():
    assert pack_answers([]) is None
    assert pack_answers(["北京"]) == "北京"
    assert pack_answers(["北京", "上海"]) == ["北京", "上海"]


def test_save_and_load_questions(tmp_path):
    q = Question(
        content="2+2=?",
        type=QuestionType.SINGLE_CHOICE,
        options=[QuestionOption("A", "3"), QuestionOption("B", "4")],
        answer="B",
    )
    path = tmp_path / "题目.json"
    save_questions(str(path), [q])

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw[0]["type"] == "single-choice"
    assert raw[0]["createdAt"] == raw[0]["updatedAt"]
    assert raw[0]["explanation"] == ""
    assert raw[0]["tags"] == []

    loaded = load_questions(str(path))
    assert loaded == [q]


def test_load_questions_rejects_non_list(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text('{"content": "x"}', encoding="utf-8")
    with pytest.raises(ValueError):
        load_questions(str(path))
