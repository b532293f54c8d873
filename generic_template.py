import logging
import re
from typing import List, Optional

from id_policy import GeneratedIds, IdPolicy
from models import Question, QuestionOption, QuestionType
from utils import to_half_width

logger = logging.getLogger(__name__)

# 题干：“1. 内容( )”，末尾的空括号去掉
Q_PAT = re.compile(r'^\d+\s*[.．]\s*(.+?)(?:\s*[(（]\s*[)）])?$')

# 选项：“A. 选项”
OPT_PAT = re.compile(r'^([A-ZＡ-Ｚ])[.．]\s+(.*)$')

# 正确答案:C 或 正确答案:C:Array;
ANS_PAT = re.compile(r'^(?:正确答案|(?i:correct answer))[:：]\s*([A-Za-zＡ-Ｚａ-ｚ])(?:[:：](.*?))?[;；]?$')

BLOCK_SEP = re.compile(r'\n\s*\n')


def _parse_block(block: str, id_policy: IdPolicy) -> Optional[Question]:
    lines = [line.strip() for line in block.strip().split("\n")]
    lines = [line for line in lines if line]
    if len(lines) < 3:
        return None

    # ---------- 1. 题干 ----------
    content = ""
    m_q = Q_PAT.match(lines[0])
    if m_q:
        content = m_q.group(1).strip()
    elif not OPT_PAT.match(lines[0]) and not ANS_PAT.match(lines[0]):
        content = lines[0]          # 兜底：首行既不是选项也不是答案，整行当题干
    if not content:
        return None

    # ---------- 2. 选项与答案 ----------
    letters = {}
    options: List[QuestionOption] = []
    answer_letter = None
    for line in lines[1:]:
        m_opt = OPT_PAT.match(line)
        if m_opt:
            opt = QuestionOption(id=id_policy.assign(m_opt.group(1)),
                                 content=m_opt.group(2).strip())
            letters.setdefault(to_half_width(m_opt.group(1)), opt.id)
            options.append(opt)
            continue
        m_ans = ANS_PAT.match(line)
        if m_ans:
            answer_letter = to_half_width(m_ans.group(1)).upper()
            break

    if answer_letter is None or not options:
        return None
    if answer_letter not in letters:
        logger.debug("答案 %s 不在选项中，跳过: %s", answer_letter, content)
        return None

    return Question(
        content=content,
        type=QuestionType.SINGLE_CHOICE,
        options=options,
        answer=letters[answer_letter],
    )


def parse_generic(text: str, id_policy: Optional[IdPolicy] = None) -> List[Question]:
    """
    通用格式：题目之间空行分隔
      1. 题干( )
      A. 选项
      B. 选项
      正确答案:B;
    """
    if not text or not text.strip():
        return []
    id_policy = id_policy or GeneratedIds()
    questions: List[Question] = []
    blocks = BLOCK_SEP.split(text.replace("\r\n", "\n").strip())
    for block in blocks:
        q = _parse_block(block, id_policy)
        if q is None:
            logger.debug("无法识别的题块: %r", block[:40])
            continue
        questions.append(q)
    logger.info("通用模板识别 %d/%d 题", len(questions), len(blocks))
    return questions
