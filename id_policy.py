"""选项 id 分配策略。

不同模板的 id 约定不同：通用模板和学习通模板为每个选项生成随机 id，
紧凑模板和 AI 输出解析直接用（半角）字母作 id。解析器只通过策略拿 id，
答案一律经 “字母 → 选项 id” 解析，不假设 id 等于字母。
"""
import uuid
from abc import ABC, abstractmethod

from utils import to_half_width


class IdPolicy(ABC):
    """给定选项字母，返回该选项在本次解析中的 id"""

    @abstractmethod
    def assign(self, letter: str) -> str:
        ...


class GeneratedIds(IdPolicy):
    """每个选项一个随机 id，仅在一次解析内稳定"""

    def assign(self, letter: str) -> str:
        return uuid.uuid4().hex[:21]


class LetterIds(IdPolicy):
    """id 就是显示的字母（全角转半角、大写）"""

    def assign(self, letter: str) -> str:
        return to_half_width(letter).strip().upper()
