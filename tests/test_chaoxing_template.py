import re
import textwrap

from chaoxing_template import Segmenter, parse_chaoxing, segment
from models import QuestionType
from parser import TEMPLATE_EXAMPLES, ScriptTemplate


def _contents(q):
    by_id = {o.id: o.content for o in q.options}
    if isinstance(q.answer, list):
        return [by_id[a] for a in q.answer]
    return by_id[q.answer]


def test_example_text():
    qs = parse_chaoxing(TEMPLATE_EXAMPLES[ScriptTemplate.CHAOXING])
    assert [q.type for q in qs] == [
        QuestionType.SINGLE_CHOICE,
        QuestionType.MULTIPLE_CHOICE,
        QuestionType.TRUE_FALSE,
        QuestionType.FILL_IN_BLANK,
    ]
    assert qs[0].content == "以下选项中，哪一个是JavaScript的基本数据类型?"
    assert _contents(qs[0]) == "Number"
    assert _contents(qs[1]) == ["React", "Vue", "Angular"]
    assert _contents(qs[2]) == "错"
    assert qs[3].answer == [".", "#"]
    assert qs[3].options == []
    assert all(q.is_consistent() for q in qs)


def test_implicit_true_false():
    qs = parse_chaoxing("2. (判断题)HTML是一种编程语言。\n正确答案:错")
    assert len(qs) == 1
    q = qs[0]
    assert q.type == QuestionType.TRUE_FALSE
    assert q.content == "HTML是一种编程语言。"
    assert [o.content for o in q.options] == ["对", "错"]
    assert _contents(q) == "错"


def test_fill_in_blank_answers():
    qs = parse_chaoxing("3. (填空题)CSS选择器中，____ 用于选择类。\n正确答案:(1) .;(2) #")
    assert len(qs) == 1
    assert qs[0].type == QuestionType.FILL_IN_BLANK
    assert qs[0].answer == [".", "#"]


def test_my_answer_layout_with_commentary():
    text = textwrap.dedent("""
        1. 下列属于质数的是
        A. 4
        B. 5
        我的答案: B 正确答案: B
        AI讲解
        5 只能被 1 和自身整除。
        2. 下列属于偶数的是
        A. 3
        B. 8
        我的答案: A 正确答案: B
    """)
    qs = parse_chaoxing(text)
    assert [q.content for q in qs] == ["下列属于质数的是", "下列属于偶数的是"]
    assert [_contents(q) for q in qs] == ["5", "8"]
    assert all(len(q.options) == 2 for q in qs)


def test_score_layout():
    text = textwrap.dedent("""
        1. 下列属于质数的是
        A. 4
        B. 5
        正确答案: B
        2.0分
        2. 下列属于偶数的是
        A. 3
        B. 8
        正确答案: B
        2.0分
    """)
    qs = parse_chaoxing(text)
    assert [_contents(q) for q in qs] == ["5", "8"]
    assert all(q.type == QuestionType.SINGLE_CHOICE for q in qs)


def test_inferred_true_false_without_label():
    qs = parse_chaoxing("1. 地球是圆的。\n正确答案:对")
    assert len(qs) == 1
    assert qs[0].type == QuestionType.TRUE_FALSE
    assert _contents(qs[0]) == "对"


def test_short_answer_label():
    qs = parse_chaoxing("1. (简答题)什么是闭包？\n正确答案:函数与其词法环境的组合")
    assert len(qs) == 1
    assert qs[0].type == QuestionType.SHORT_ANSWER
    assert qs[0].answer == "函数与其词法环境的组合"
    assert qs[0].options == []


def test_full_width_options_and_answer():
    qs = parse_chaoxing("1. (单选题)选出正确的一项\nＡ．甲\nＢ．乙\n正确答案：Ｂ")
    assert len(qs) == 1
    assert _contents(qs[0]) == "乙"


def test_unknown_answer_letter_drops_block():
    text = textwrap.dedent("""
        1. (多选题)题目内容在这里
        A. x
        B. y
        正确答案:A,C
        2. (单选题)第二道题的题干
        A. x
        B. y
        正确答案:B
    """)
    qs = parse_chaoxing(text)
    assert [q.content for q in qs] == ["第二道题的题干"]


def test_option_ids_are_generated():
    qs = parse_chaoxing("1. (单选题)选出正确的一项\nA. 甲\nB. 乙\n正确答案:A")
    assert [o.id for o in qs[0].options] != ["A", "B"]


def test_segment_prefers_most_blocks_then_list_order():
    text = "1. 第一题的题干内容比较长\n2. 第二题的题干内容比较长"
    first = Segmenter("first", re.compile(r'(\d\. 第一题[^\n]*)'))
    second = Segmenter("second", re.compile(r'(\d\. 第二题[^\n]*)'))
    both = Segmenter("both", re.compile(r'(\d\. [^\n]*)'))

    assert segment(text, (first, second)) == ["1. 第一题的题干内容比较长"]
    assert segment(text, (second, first)) == ["2. 第二题的题干内容比较长"]
    assert len(segment(text, (first, both, second))) == 2


def test_short_blocks_are_noise():
    assert segment("1. (单选)ab") == []
    assert parse_chaoxing("随便一段文字") == []


def test_fill_in_blank_answer_on_index_lines():
    qs = parse_chaoxing("1. (填空题)中国的首都是____，上海简称____。\n(1) 北京\n(2) 沪")
    assert qs[0].content == "中国的首都是____，上海简称____。"
    assert qs[0].answer == ["北京", "沪"]


def test_answer_letter_followed_by_option_text():
    qs = parse_chaoxing("1. (单选题)哪个是基本类型?\nA. Array\nB. Object\nC. Number\n正确答案:C Number;")
    assert len(qs) == 1
    assert qs[0].type == QuestionType.SINGLE_CHOICE
    assert _contents(qs[0]) == "Number"


def test_lowercase_answer_letters():
    qs = parse_chaoxing("1. (单选题)哪个是基本类型?\nA. Array\nB. Object\n正确答案:b")
    assert _contents(qs[0]) == "Object"

    qs = parse_chaoxing("1. (多选题)哪些是框架?\nA. React\nB. Vue\nC. Python\n正确答案:a、b")
    assert _contents(qs[0]) == ["React", "Vue"]


def test_full_width_semicolon_between_blanks():
    qs = parse_chaoxing("1. (填空题)中国的首都是____，上海简称____。\n正确答案:(1) 北京；(2) 沪")
    assert qs[0].answer == ["北京", "沪"]


def test_bracket_that_is_not_a_type_label_stays_in_stem():
    qs = parse_chaoxing("1. (x+1)^2 的展开式是?\nA. x^2+1\nB. x^2+2x+1\n正确答案:B")
    assert qs[0].content == "(x+1)^2 的展开式是?"
    assert qs[0].type == QuestionType.SINGLE_CHOICE
    assert _contents(qs[0]) == "x^2+2x+1"
