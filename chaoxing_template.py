"""学习通（ChaoXing）格式解析。

复制出来的文本里题号、题型标签、分值、我的答案 / 正确答案以及 “AI讲解”
段落顺序不固定。先给讲解段落打上标记，再用几种切分规则各切一遍，
取切出题块最多的那一种（少切、把两题并成一块是最常见的失败）。
"""
import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

from fill_blank import INDEX_LINE, extract_fill_answer, find_fill_answer_text
from id_policy import GeneratedIds, IdPolicy
from models import Question, QuestionOption, QuestionType
from utils import to_half_width

logger = logging.getLogger(__name__)

# 题块最短长度（去掉首尾空白后必须大于它）
MIN_BLOCK_LENGTH = 10

SENTINEL = "###AI_EXPLANATION###"
COMMENTARY_PAT = re.compile(r'AI讲解|AI Explanation')

# 行首题号 “12.” ，排除 “2.0分” 这种小数
Q_NUM = r'^[ \t]*\d+[ \t]*[.．](?!\d)'
BLOCK_END = r'(?=' + Q_NUM + r'|\s*' + SENTINEL + r'|\Z)'

NUM_MARK = re.compile(r'\d+\s*[.．]')
FALLBACK_SPLIT = re.compile(r'(?=' + Q_NUM + r'[ \t]*[(（])', re.M)
COMMENTARY_STRIP = re.compile(SENTINEL + r'[\s\S]*?(?=' + Q_NUM + r'|\Z)', re.M)

# 首行：“1. (单选题)题干”
HEAD_PAT = re.compile(r'^\d+\s*[.．]\s*(?:[(（]([^)）]+)[)）])?\s*(.*)$')
# 选项：“A. xx” “A．xx” “A、xx” “(A) xx”
OPT_PAT = re.compile(r'^(?:([A-ZＡ-Ｚ])[.．、]|[(（]([A-ZＡ-Ｚ])[)）])\s*(.*)$')
ANSWER_PAT = re.compile(r'(?:正确答案|(?i:correct\s*answer))\s*[:：]\s*(.*)$')
MARKER_PAT = re.compile(r'我的答案|正确答案|(?i:my\s*answer|correct\s*answer)|\d+(?:\.\d+)?\s*分')
# 答案字母：逗号 / 顿号分隔、连写（ABD）或空格隔开的单个字母；
# 空格后面跟的是单词（“C Number”）就到此为止
LETTERS_PAT = re.compile(r'^\[?([A-Z](?:\s*[,，、]\s*[A-Z]|\s+[A-Z](?![A-Z])|[A-Z])*)')
TRUTH_PAT = re.compile(r'^(正确|错误|对|错|true|false|√|×)', re.I)

# 推断题型用
HAS_OPTIONS = re.compile(r'(?m)^\s*[AＡ][.．]|[(（][A-DＡ-Ｄ][)）]')
HAS_BLANK = re.compile(r'_{4,}|＿{2,}|填空|(?i:fill)')

TRUE_TOKENS = {"对", "正确", "true", "√"}
FALSE_TOKENS = {"错", "错误", "false", "×"}

LABEL_TYPES = (
    (("填空", "blank"), QuestionType.FILL_IN_BLANK),
    (("单选", "single"), QuestionType.SINGLE_CHOICE),
    (("多选", "multiple"), QuestionType.MULTIPLE_CHOICE),
    (("判断", "true", "false"), QuestionType.TRUE_FALSE),
    (("简答", "问答", "论述", "名词解释", "short"), QuestionType.SHORT_ANSWER),
)


@dataclass(frozen=True)
class Segmenter:
    """一种切题规则：pattern 的第 1 组就是一个题块"""
    name: str
    pattern: Pattern

    def split(self, text: str) -> List[str]:
        return [m.group(1).strip() for m in self.pattern.finditer(text)]


# 按优先级排列：块数相同时排在前面的胜出
SEGMENTERS: Tuple[Segmenter, ...] = (
    Segmenter("type_tag", re.compile(
        r'(' + Q_NUM + r'[ \t]*[(（][^)）\n]+[)）][\s\S]*?)'
        r'(?=' + Q_NUM + r'[ \t]*[(（]|\s*' + SENTINEL + r'|\Z)', re.M)),
    Segmenter("answer_pair", re.compile(
        r'(' + Q_NUM + r'[\s\S]*?(?:我的答案|My Answer)[\s\S]*?(?:正确答案|Correct Answer)[\s\S]*?)'
        + BLOCK_END, re.M)),
    Segmenter("score", re.compile(
        r'(' + Q_NUM + r'[\s\S]*?\d+(?:\.\d+)?\s*(?:分|score)\s*)' + BLOCK_END, re.M)),
)


def clean_text(text: str) -> str:
    """统一换行、去空行，并给讲解段落打标记"""
    text = re.sub(r'\n\s*\n', "\n", text.replace("\r\n", "\n"))
    return COMMENTARY_PAT.sub(SENTINEL, text)


def segment(text: str, segmenters: Sequence[Segmenter] = SEGMENTERS) -> List[str]:
    """用每种规则切一遍，取题块最多的结果；都切不出来时按 “题号. (” 粗切"""
    best: List[str] = []
    best_name = None
    for seg in segmenters:
        blocks = seg.split(text)
        if len(blocks) > len(best):
            best, best_name = blocks, seg.name
    if not best:
        best, best_name = FALLBACK_SPLIT.split(text), "fallback"
    logger.debug("切题规则 %s 得到 %d 块", best_name, len(best))
    return [b for b in best
            if len(b.strip()) > MIN_BLOCK_LENGTH and NUM_MARK.search(b)]


def _truth_value(rest: str) -> Optional[bool]:
    m = TRUTH_PAT.match(rest.strip())
    if not m:
        return None
    return m.group(1).lower() in TRUE_TOKENS


def _answer_letters(rest: str) -> List[str]:
    m = LETTERS_PAT.match(to_half_width(rest.strip()).upper())
    if not m:
        return []
    letters: List[str] = []
    for ch in re.findall(r'[A-Z]', m.group(1)):
        if ch not in letters:
            letters.append(ch)
    return letters


def _label_type(label: str) -> Optional[QuestionType]:
    label = label.lower()
    for keys, qtype in LABEL_TYPES:
        if any(k in label for k in keys):
            return qtype
    return None


def infer_type(block: str) -> QuestionType:
    """没有题型标签时按内容推断"""
    if HAS_OPTIONS.search(block):
        for line in block.split("\n"):
            m = ANSWER_PAT.search(line)
            if m:
                if len(_answer_letters(m.group(1))) > 1:
                    return QuestionType.MULTIPLE_CHOICE
                break
        return QuestionType.SINGLE_CHOICE
    if "判断" in block or any(
            _truth_value(m.group(1)) is not None
            for m in map(ANSWER_PAT.search, block.split("\n")) if m):
        return QuestionType.TRUE_FALSE
    if HAS_BLANK.search(block):
        return QuestionType.FILL_IN_BLANK
    return QuestionType.SINGLE_CHOICE


def _extra_content(lines: List[str]) -> List[str]:
    """题干换行部分：首行之后、第一个选项之前的非答案 / 分值行"""
    first_opt = next((k for k in range(1, len(lines)) if OPT_PAT.match(lines[k])), -1)
    extra = []
    if first_opt > 1:
        extra = [line for line in lines[1:first_opt] if not MARKER_PAT.search(line)]
    elif first_opt == -1:
        for line in lines[1:]:
            if MARKER_PAT.search(line) or INDEX_LINE.match(line):
                break
            extra.append(line)
    return extra


def _option_letter(m) -> str:
    return to_half_width(m.group(1) or m.group(2)).upper()


def _resolve_choice(lines: List[str], qtype: QuestionType, content: str,
                    id_policy: IdPolicy) -> Optional[Question]:
    options: List[QuestionOption] = []
    letter_ids: Dict[str, str] = {}
    rest = None
    for line in lines[1:]:
        m_opt = OPT_PAT.match(line)
        if m_opt:
            letter = _option_letter(m_opt)
            opt = QuestionOption(id=id_policy.assign(letter), content=m_opt.group(3).strip())
            letter_ids.setdefault(letter, opt.id)
            options.append(opt)
            continue
        m_ans = ANSWER_PAT.search(line)
        if m_ans:
            rest = m_ans.group(1).strip()
            break
    if not rest:
        return None

    # ---------- 对 / 错 ----------
    truth = _truth_value(rest)
    if truth is not None:
        if not options:
            qtype = QuestionType.TRUE_FALSE
            options = [QuestionOption(id=id_policy.assign("A"), content="对"),
                       QuestionOption(id=id_policy.assign("B"), content="错")]
            letter_ids = {"A": options[0].id, "B": options[1].id}
        tokens = TRUE_TOKENS if truth else FALSE_TOKENS
        matched = next((o.id for o in options if o.content.strip().lower() in tokens), None)
        answer = matched or letter_ids.get("A" if truth else "B")
        if answer is None:
            return None
        if qtype == QuestionType.MULTIPLE_CHOICE:
            return Question(content=content, type=qtype, options=options, answer=[answer])
        if qtype == QuestionType.TRUE_FALSE and len(options) != 2:
            qtype = QuestionType.SINGLE_CHOICE
        return Question(content=content, type=qtype, options=options, answer=answer)

    # ---------- 字母答案 ----------
    letters = _answer_letters(rest)
    if not letters or not options:
        return None
    missing = [l for l in letters if l not in letter_ids]
    if missing:
        logger.debug("答案 %s 不在选项中，跳过: %s", "".join(missing), content)
        return None
    ids = [letter_ids[l] for l in letters]
    if qtype == QuestionType.MULTIPLE_CHOICE or len(ids) > 1:
        return Question(content=content, type=QuestionType.MULTIPLE_CHOICE,
                        options=options, answer=ids)
    if qtype == QuestionType.TRUE_FALSE and len(options) != 2:
        qtype = QuestionType.SINGLE_CHOICE
    if qtype not in (QuestionType.SINGLE_CHOICE, QuestionType.TRUE_FALSE):
        qtype = QuestionType.SINGLE_CHOICE
    return Question(content=content, type=qtype, options=options, answer=ids[0])


def parse_block(block: str, id_policy: IdPolicy) -> Optional[Question]:
    block = COMMENTARY_STRIP.sub("", block).replace(SENTINEL, "")
    lines = [line.strip() for line in block.split("\n")]
    lines = [line for line in lines if line]
    if len(lines) < 2:
        return None

    # ---------- 1. 题干与题型 ----------
    m_head = HEAD_PAT.match(lines[0])
    head = lines[0]
    qtype = None
    if m_head:
        head = m_head.group(2).strip()
        if m_head.group(1):
            qtype = _label_type(m_head.group(1))
            if qtype is None:
                # 不是题型标签，括号属于题干，如 “(x+1)^2 的展开式”
                head = lines[0][m_head.start(1) - 1:].strip()
    content = "\n".join([head] + _extra_content(lines)).strip()
    if not content:
        return None

    if qtype is None:
        qtype = infer_type(block)

    # ---------- 2. 填空 / 简答 ----------
    if qtype == QuestionType.FILL_IN_BLANK:
        answer = extract_fill_answer(lines[1:])
        if answer is None:
            return None
        return Question(content=content, type=qtype, options=[], answer=answer)
    if qtype == QuestionType.SHORT_ANSWER:
        answer = "\n".join(find_fill_answer_text(lines[1:])).strip()
        if not answer:
            return None
        return Question(content=content, type=qtype, options=[], answer=answer)

    # ---------- 3. 选择 / 判断 ----------
    return _resolve_choice(lines, qtype, content, id_policy)


def parse_chaoxing(text: str, id_policy: Optional[IdPolicy] = None) -> List[Question]:
    if not text or not text.strip():
        return []
    id_policy = id_policy or GeneratedIds()
    blocks = segment(clean_text(text))
    questions: List[Question] = []
    for block in blocks:
        q = parse_block(block, id_policy)
        if q is None:
            logger.debug("无法识别的题块: %r", block[:40])
            continue
        questions.append(q)
    logger.info("学习通模板识别 %d/%d 题", len(questions), len(blocks))
    return questions
