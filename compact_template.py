"""紧凑单选格式：题干和第一个选项挤在同一行，后面的选项 / 题干可能折行。

    1. 汇合形成面后静脉的是A．面前静脉，颞浅静脉
    B．颞浅静脉，领内静脉
    参考答案：B

逐行扫描的状态机，选项 id 直接用字母。
"""
import logging
import re
from enum import Enum
from typing import List, Optional

from id_policy import IdPolicy, LetterIds
from models import Question, QuestionOption, QuestionType
from utils import to_half_width

logger = logging.getLogger(__name__)

SEQ_PAT = re.compile(r'^\s*\d+\s*[.．](?!\d)')
OPT_PAT = re.compile(r'^([A-EＡ-Ｅ])[.．]\s*(.*)$')
ANS_PAT = re.compile(r'(?:参考答案|(?i:reference answer))[:：]?\s*([A-EＡ-Ｅa-e])')
INLINE_OPT = re.compile(r'([A-EＡ-Ｅ])[.．]')


class State(Enum):
    NONE = 0
    QUESTION = 1
    OPTION = 2
    ANSWER = 3


class _Builder:
    """当前正在拼装的一道题"""

    def __init__(self, id_policy: IdPolicy):
        self.id_policy = id_policy
        self.stem = ""
        self.options: List[QuestionOption] = []
        self.letters: List[str] = []
        self.open_letter = ""
        self.open_text = ""
        self.answer = ""

    def open_option(self, letter: str, text: str):
        self.close_option()
        self.open_letter = to_half_width(letter).upper()
        self.open_text = text.strip()

    def close_option(self):
        if self.open_letter:
            self.options.append(QuestionOption(
                id=self.id_policy.assign(self.open_letter),
                content=re.sub(r'\s+', " ", self.open_text).strip(),
            ))
            self.letters.append(self.open_letter)
        self.open_letter = ""
        self.open_text = ""

    def build(self) -> Optional[Question]:
        self.close_option()
        content = self.stem.strip()
        if not content or not self.options or not self.answer:
            return None
        if self.answer not in self.letters:
            logger.debug("答案 %s 不在选项中，跳过: %s", self.answer, content)
            return None
        return Question(
            content=content,
            type=QuestionType.SINGLE_CHOICE,
            options=self.options,
            answer=self.options[self.letters.index(self.answer)].id,
        )


def _split_inline(builder: _Builder, rest: str) -> bool:
    """题号行剩余部分：第一个选项标记之前是题干，之后逐个切出选项"""
    markers = list(INLINE_OPT.finditer(rest))
    if not markers:
        builder.stem = rest.strip()
        return False
    builder.stem = rest[:markers[0].start()].strip()
    for i, m in enumerate(markers):
        end = markers[i + 1].start() if i + 1 < len(markers) else len(rest)
        # 最后一个选项保持打开，折行内容接在它后面
        builder.open_option(m.group(1), rest[m.end():end])
    return True


def parse_compact(text: str, id_policy: Optional[IdPolicy] = None) -> List[Question]:
    if not text or not text.strip():
        return []
    id_policy = id_policy or LetterIds()
    questions: List[Question] = []
    state = State.NONE
    builder: Optional[_Builder] = None

    def commit():
        if builder is None:
            return
        q = builder.build()
        if q is not None:
            questions.append(q)

    for raw in text.replace("\r\n", "\n").split("\n"):
        line = raw.strip()
        if not line:
            continue

        # ---------- 1. 题号行 ----------
        m_seq = SEQ_PAT.match(line)
        if m_seq:
            commit()
            builder = _Builder(id_policy)
            has_options = _split_inline(builder, line[m_seq.end():])
            state = State.OPTION if has_options else State.QUESTION
            continue

        # 题号之前的内容、答案之后的解析都忽略
        if builder is None or state == State.ANSWER:
            continue

        # ---------- 2. 单独一行的选项 ----------
        m_opt = OPT_PAT.match(line)
        if m_opt:
            builder.open_option(m_opt.group(1), m_opt.group(2))
            state = State.OPTION
            continue

        # ---------- 3. 参考答案 ----------
        m_ans = ANS_PAT.search(line)
        if m_ans:
            builder.close_option()
            builder.answer = to_half_width(m_ans.group(1)).upper()
            state = State.ANSWER
            continue

        # ---------- 4. 折行 ----------
        if state == State.QUESTION:
            builder.stem += " " + line
        elif state == State.OPTION and builder.open_letter:
            builder.open_text += " " + line

    commit()
    logger.info("紧凑模板识别 %d 题", len(questions))
    return questions
