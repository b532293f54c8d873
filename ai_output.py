"""解析 AI 转换结果：每题首行带题型标签，题与题之间空行分隔。

    单选题：题目内容
    A. 选项1
    B. 选项2
    答案：A
    解析：可选
"""
import logging
import re
from typing import List, Optional, Tuple

from id_policy import IdPolicy, LetterIds
from models import Answer, Question, QuestionOption, QuestionType
from utils import pack_answers, split_answers, to_half_width

logger = logging.getLogger(__name__)

LABELS = (
    (re.compile(r'^(?:单选题[:：]|(?i:single\s*choice:))\s*'), QuestionType.SINGLE_CHOICE),
    (re.compile(r'^(?:多选题[:：]|(?i:multiple\s*choice:))\s*'), QuestionType.MULTIPLE_CHOICE),
    (re.compile(r'^(?:判断题[:：]|(?i:true[/-]false:))\s*'), QuestionType.TRUE_FALSE),
    (re.compile(r'^(?:简答题[:：]|(?i:short\s*answer:))\s*'), QuestionType.SHORT_ANSWER),
    (re.compile(r'^(?:填空题[:：]|(?i:fill\s*in\s*(?:the\s*)?blank:))\s*'), QuestionType.FILL_IN_BLANK),
)

ANSWER_PAT = re.compile(r'^(?:答案[:：]|(?i:answer:))\s*(.*)$')
EXPLANATION_PAT = re.compile(r'^(?:解析[:：]|(?i:explanation:))\s*(.*)$')
OPT_PAT = re.compile(r'^([A-Za-zＡ-Ｚａ-ｚ])[.．](.*)$')
BLANK_PAT = re.compile(r'_{4,}')

TRUE_WORDS = {"对", "正确", "true", "correct", "t", "√"}
FALSE_WORDS = {"错", "错误", "false", "incorrect", "f", "×"}


def _find(lines: List[str], pat) -> Optional[str]:
    for line in lines:
        m = pat.match(line)
        if m:
            return m.group(1).strip()
    return None


def _parse_options(lines: List[str], id_policy: IdPolicy) -> List[Tuple[str, QuestionOption]]:
    """选项可以跨多行（如代码块），直到答案 / 解析行为止"""
    options: List[Tuple[str, QuestionOption]] = []
    for line in lines:
        if ANSWER_PAT.match(line) or EXPLANATION_PAT.match(line):
            break
        m = OPT_PAT.match(line)
        if m:
            letter = to_half_width(m.group(1)).upper()
            options.append((letter, QuestionOption(id=id_policy.assign(letter),
                                                   content=m.group(2).strip())))
        elif options:
            options[-1][1].content += "\n" + line
    for _, opt in options:
        opt.content = opt.content.strip()
    return options


def _choice_answer(text: str, options, multiple: bool) -> Optional[Answer]:
    by_letter = {}
    for letter, opt in options:
        by_letter.setdefault(letter, opt.id)
    text = to_half_width(text).upper()
    if not multiple:
        m = re.search(r'[A-Z]', text)
        return by_letter.get(m.group(0)) if m else None
    letters = [t for t in re.split(r'[\s,，、]+', text) if t]
    if len(letters) == 1 and letters[0].isalpha():
        letters = list(letters[0])          # “ABD” 这种连写
    if not letters or any(l not in by_letter for l in letters):
        return None
    return [by_letter[l] for l in dict.fromkeys(letters)]


def _detect_type(lines: List[str]) -> QuestionType:
    answer = _find(lines, ANSWER_PAT) or ""
    if BLANK_PAT.search(lines[0]):
        return QuestionType.FILL_IN_BLANK
    if any(OPT_PAT.match(line) for line in lines[1:]):
        if "," in answer or "，" in answer or "、" in answer:
            return QuestionType.MULTIPLE_CHOICE
        return QuestionType.SINGLE_CHOICE
    if answer.lower() in TRUE_WORDS | FALSE_WORDS:
        return QuestionType.TRUE_FALSE
    return QuestionType.SHORT_ANSWER


def _parse_block(block: str, id_policy: IdPolicy) -> Optional[Question]:
    lines = [line.strip() for line in block.split("\n") if line.strip()]
    if len(lines) < 2:
        return None

    qtype = None
    content = lines[0]
    for pat, label_type in LABELS:
        m = pat.match(lines[0])
        if m:
            qtype, content = label_type, lines[0][m.end():].strip()
            break
    if qtype is None:
        qtype = _detect_type(lines)
    if not content:
        return None

    answer_text = _find(lines, ANSWER_PAT)
    explanation = _find(lines, EXPLANATION_PAT) or ""
    options: List[QuestionOption] = []

    if qtype in (QuestionType.SINGLE_CHOICE, QuestionType.MULTIPLE_CHOICE):
        parsed = _parse_options(lines[1:], id_policy)
        options = [opt for _, opt in parsed]
        answer = _choice_answer(answer_text or "", parsed,
                                qtype == QuestionType.MULTIPLE_CHOICE)
    elif qtype == QuestionType.TRUE_FALSE:
        options = [QuestionOption(id=id_policy.assign("A"), content="对"),
                   QuestionOption(id=id_policy.assign("B"), content="错")]
        word = (answer_text or "").lower()
        answer = None
        if word in TRUE_WORDS:
            answer = options[0].id
        elif word in FALSE_WORDS:
            answer = options[1].id
    elif qtype == QuestionType.FILL_IN_BLANK:
        if not BLANK_PAT.search(content):
            content = re.sub(r'[(（][^)）]+[)）]', "____", content)
        answer = pack_answers(split_answers(answer_text or ""))
    else:
        answer = answer_text or None

    if not answer:
        logger.debug("AI 输出题块缺少可用答案: %s", content)
        return None
    return Question(content=content, type=qtype, options=options,
                    answer=answer, explanation=explanation)


def parse_ai_output(text: str, id_policy: Optional[IdPolicy] = None) -> List[Question]:
    """解析 AI 返回的文本，题块解析失败时跳过"""
    if not text or not text.strip():
        return []
    id_policy = id_policy or LetterIds()
    blocks = [b for b in re.split(r'\n\s*\n+', text.replace("\r\n", "\n")) if b.strip()]
    questions = []
    for block in blocks:
        q = _parse_block(block, id_policy)
        if q is not None:
            questions.append(q)
    logger.info("AI 输出识别 %d/%d 题", len(questions), len(blocks))
    return questions
