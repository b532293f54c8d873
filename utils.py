import json
import re
from typing import List, Optional

from models import Answer, Question

# 全角 ASCII 区（！ 到 ～）与半角相差固定偏移
FULLWIDTH_START = 0xFF01
FULLWIDTH_END = 0xFF5E
FULLWIDTH_OFFSET = 0xFEE0

# 半角、全角分号都当分隔符
SEPARATORS = ";；"

# 填空序号前缀，如 “(1)” “（2）”
BLANK_INDEX_PREFIX = re.compile(r'^[(（]\s*\d+\s*[)）]\s*')


def to_half_width(text: str) -> str:
    """全角字母 / 标点转半角，其余字符不变"""
    return "".join(
        chr(ord(ch) - FULLWIDTH_OFFSET) if FULLWIDTH_START <= ord(ch) <= FULLWIDTH_END else ch
        for ch in text
    )


def split_answers(raw: str) -> List[str]:
    """
    按分号（“;” 或 “；”）拆分多个填空答案：
      “;;” “；；” → 字面分号
      “;” “；”   → 分隔符
    从左到右贪心，所以 “a;;;b” → ["a;", "b"]。
    每段去掉首尾空白和 “(1)” 这类序号，空段丢弃。
    """
    fragments: List[str] = []
    buf: List[str] = []
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch in SEPARATORS:
            if raw.startswith(ch * 2, i):
                buf.append(ch)
                i += 2
                continue
            fragments.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
        i += 1
    fragments.append("".join(buf))

    cleaned = []
    for frag in fragments:
        frag = BLANK_INDEX_PREFIX.sub("", frag.strip()).strip()
        if frag:
            cleaned.append(frag)
    return cleaned


def pack_answers(fragments: List[str]) -> Optional[Answer]:
    """0 段 → None；1 段 → 字符串；多段 → 列表"""
    if not fragments:
        return None
    if len(fragments) == 1:
        return fragments[0]
    return list(fragments)


def save_questions(file_path: str, questions: List[Question]) -> None:
    """把题目列表保存为 JSON（题库导入格式）"""
    data = [q.to_dict() for q in questions]
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def load_questions(file_path: str) -> List[Question]:
    """从 JSON 文件加载题目，返回 Question 对象列表"""
    with open(file_path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, list):
        raise ValueError(f"{file_path} 不是题目列表")
    return [Question.from_dict(item) for item in raw]
