"""填空题答案提取：学习通模板和 AI 输出解析共用。

答案文本按以下顺序查找，命中即停：
  1. “正确答案:” 同一行后面的文字（可带 “(1)” 序号）
  2. 只有 “正确答案:” 的一行 → 取下一行
  3. “我的答案” 之后出现的 “正确答案 (1) ...”
  4. 分值行（“2分”）之后的 “(1) ...” 序号行
  5. 任意位置第一处 “(1) ...” 序号行（跳过 “我的答案” 行）
"""
import logging
import re
from typing import List, Optional

from models import Answer
from utils import pack_answers, split_answers

logger = logging.getLogger(__name__)

CORRECT = r'(?:正确答案|(?i:correct\s*answer))'
MY_ANSWER = re.compile(r'我的答案|(?i:my\s*answer)')

SAME_LINE = re.compile(CORRECT + r'\s*[:：]\s*(\S.*)$')
BARE_MARKER = re.compile(r'^' + CORRECT + r'\s*[:：]?$')
INDEXED_CORRECT = re.compile(CORRECT + r'\s*[:：]?\s*([(（]\s*\d+\s*[)）].*)$')
SCORE_LINE = re.compile(r'\d+(?:\.\d+)?\s*(?:分|(?i:points?|score))')
INDEX_LINE = re.compile(r'^[(（]\s*\d+\s*[)）]\s*\S')


def _index_run(lines: List[str], start: int) -> List[str]:
    """从 start 开始收集连续的序号行"""
    run = []
    for line in lines[start:]:
        if not INDEX_LINE.match(line) or MY_ANSWER.search(line):
            break
        run.append(line)
    return run


def find_fill_answer_text(lines: List[str]) -> List[str]:
    """按顺序尝试各条规则，返回找到的原始答案文本（可能多行）"""
    lines = [line.strip() for line in lines if line and line.strip()]

    # ---------- 1. 同一行 ----------
    for line in lines:
        m = SAME_LINE.search(line)
        if m:
            return [m.group(1).strip()]

    # ---------- 2. 单独一行的 “正确答案:” ----------
    for i, line in enumerate(lines[:-1]):
        if BARE_MARKER.match(line):
            return [lines[i + 1]]

    # ---------- 3. 我的答案 → 正确答案 ----------
    for i, line in enumerate(lines):
        if not MY_ANSWER.search(line):
            continue
        for later in lines[i + 1:]:
            m = INDEXED_CORRECT.search(later)
            if m:
                return [m.group(1).strip()]

    # ---------- 4. 分值行 → 序号行 ----------
    for i, line in enumerate(lines):
        if not SCORE_LINE.search(line):
            continue
        for j in range(i + 1, len(lines)):
            run = _index_run(lines, j)
            if run:
                return run

    # ---------- 5. 兜底：第一处序号行 ----------
    for i, line in enumerate(lines):
        if MY_ANSWER.search(line):
            continue
        run = _index_run(lines, i)
        if run:
            return run

    return []


def extract_fill_answer(lines: List[str]) -> Optional[Answer]:
    """查找并拆分填空答案；找不到返回 None"""
    fragments: List[str] = []
    for raw in find_fill_answer_text(lines):
        fragments.extend(split_answers(raw))
    answer = pack_answers(fragments)
    if answer is None:
        logger.debug("填空题未找到答案: %r", lines[:3])
    return answer
