import textwrap

from compact_template import parse_compact
from models import QuestionType
from parser import TEMPLATE_EXAMPLES, ScriptTemplate


def test_stem_and_options_on_one_line():
    qs = parse_compact("1. Stem text A.Opt1 B.Opt2\n参考答案：B")
    assert len(qs) == 1
    q = qs[0]
    assert q.type == QuestionType.SINGLE_CHOICE
    assert q.content == "Stem text"
    assert [(o.id, o.content) for o in q.options] == [("A", "Opt1"), ("B", "Opt2")]
    assert q.answer == "B"


def test_example_text():
    qs = parse_compact(TEMPLATE_EXAMPLES[ScriptTemplate.SINGLE_CHOICE1])
    assert len(qs) == 2
    first, second = qs
    assert first.content == "关于上颌第一磨牙髓腔形态的描述不正确的是"
    assert [o.id for o in first.options] == ["A", "B", "C", "D", "E"]
    assert first.options[1].content == "髓室顶形凹，最凹处约接近牙冠中1／3"
    assert first.answer == "B"
    assert second.content == "汇合形成面后静脉的是"
    assert second.options[0].content == "面前静脉，颞浅静脉"
    assert all(q.is_consistent() for q in qs)


def test_wrapped_lines_and_trailing_explanation():
    text = textwrap.dedent("""
        1. 下列说法
        正确的是
        A. 第一项
        内容续行
        B. 第二项
        参考答案：A
        A. 解析里的选项样式
        这一行也被忽略
    """)
    qs = parse_compact(text)
    assert len(qs) == 1
    q = qs[0]
    assert q.content == "下列说法 正确的是"
    assert [o.content for o in q.options] == ["第一项 内容续行", "第二项"]
    assert q.answer == "A"


def test_wrap_after_inline_options_joins_last_option():
    qs = parse_compact("1. 题干A.甲B.乙的前半句\n乙的后半句\n参考答案：B")
    assert qs[0].options[1].content == "乙的前半句 乙的后半句"


def test_incomplete_question_skipped():
    text = textwrap.dedent("""
        1. 没有答案的题A.甲B.乙
        2. 有答案的题A.甲B.乙
        参考答案：A
        3. 答案不在选项里A.甲B.乙
        参考答案：E
    """)
    qs = parse_compact(text)
    assert [q.content for q in qs] == ["有答案的题"]


def test_full_width_letters():
    qs = parse_compact("1. 题干Ａ．甲Ｂ．乙\n参考答案：Ｂ")
    assert [o.id for o in qs[0].options] == ["A", "B"]
    assert qs[0].answer == "B"


def test_text_before_first_number_ignored():
    qs = parse_compact("练习题\nA. 不是选项\n1. 题干A.甲B.乙\n参考答案：A")
    assert len(qs) == 1
    assert qs[0].answer == "A"
