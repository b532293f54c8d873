import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class QuestionType(str, Enum):
    """题型，取值与题库存储约定一致"""
    SINGLE_CHOICE = "single-choice"
    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"
    SHORT_ANSWER = "short-answer"
    FILL_IN_BLANK = "fill-in-blank"


CHOICE_TYPES = (QuestionType.SINGLE_CHOICE, QuestionType.MULTIPLE_CHOICE)

Answer = Union[str, List[str]]


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class QuestionOption:
    """选项：id 由各模板的 id 策略分配"""
    id: str
    content: str


@dataclass
class Question:
    """解析得到的单道题目（尚未入库，没有题目 id）"""
    content: str                          # 题干（可包含换行）
    type: QuestionType
    options: List[QuestionOption]         # 简答 / 填空为空列表
    answer: Answer                        # 选择题为选项 id；填空为答案文本
    explanation: str = ""
    tags: List[str] = field(default_factory=list)
    created_at: int = field(default_factory=now_ms)
    updated_at: Optional[int] = None

    def __post_init__(self):
        # 创建时两个时间戳相同
        if self.updated_at is None:
            self.updated_at = self.created_at

    def option_ids(self) -> List[str]:
        return [opt.id for opt in self.options]

    def answer_list(self) -> List[str]:
        if isinstance(self.answer, list):
            return list(self.answer)
        return [self.answer] if self.answer else []

    def is_consistent(self) -> bool:
        """检查记录是否满足输出约定"""
        if not self.content.strip():
            return False
        answers = self.answer_list()
        if not answers:
            return False
        if self.type in CHOICE_TYPES or self.type == QuestionType.TRUE_FALSE:
            ids = self.option_ids()
            if not ids:
                return False
            if self.type == QuestionType.TRUE_FALSE and len(ids) != 2:
                return False
            if self.type != QuestionType.MULTIPLE_CHOICE and len(answers) != 1:
                return False
            return all(a in ids for a in answers)
        # 简答 / 填空：不引用选项
        return not self.options and all(a.strip() for a in answers)

    def to_dict(self) -> Dict[str, Any]:
        """转成题库存储约定的字典（camelCase 时间戳）"""
        return {
            "content": self.content,
            "type": self.type.value,
            "options": [{"id": o.id, "content": o.content} for o in self.options],
            "answer": list(self.answer) if isinstance(self.answer, list) else self.answer,
            "explanation": self.explanation,
            "tags": list(self.tags),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Question":
        created = raw.get("createdAt", raw.get("created_at"))
        updated = raw.get("updatedAt", raw.get("updated_at"))
        return cls(
            content=raw["content"],
            type=QuestionType(raw["type"]),
            options=[QuestionOption(id=o["id"], content=o["content"])
                     for o in raw.get("options") or []],
            answer=raw.get("answer", ""),
            explanation=raw.get("explanation") or "",
            tags=list(raw.get("tags") or []),
            created_at=created if created is not None else now_ms(),
            updated_at=updated,
        )
