"""
Survey data types and their store record conversions.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class QuestionKind(str, Enum):
    QCM = "qcm"
    TEXT = "text"


@dataclass
class Survey:
    id: str
    title: str
    description: str = ""
    status: str = "open"  # 'open' or 'closed'
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    allow_anonymous: bool = False
    is_form: bool = False  # forms collect answers but never publish results
    created_at: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.status == "open"

    @property
    def shows_results(self) -> bool:
        return self.status == "closed" and not self.is_form

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Survey":
        return cls(
            id=str(record.get("id", "")),
            title=record.get("title") or "",
            description=record.get("description") or "",
            status=record.get("status") or "open",
            start_date=record.get("start_date"),
            end_date=record.get("end_date"),
            allow_anonymous=bool(record.get("allow_anonymous")),
            is_form=bool(record.get("is_form")),
            created_at=record.get("created_at"),
        )


@dataclass
class Option:
    id: str
    text: str
    display_order: int = 0

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Option":
        return cls(
            id=str(record.get("id", "")),
            text=record.get("option_text") or "",
            display_order=int(record.get("display_order") or 0),
        )


@dataclass
class Question:
    id: str
    text: str
    kind: QuestionKind = QuestionKind.TEXT
    display_order: int = 0
    is_required: bool = False
    options: List[Option] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Dict[str, Any], options: Optional[List[Option]] = None) -> "Question":
        raw_kind = record.get("question_type")
        try:
            kind = QuestionKind(raw_kind)
        except ValueError:
            logger.warning(f"Question {record.get('id')}: unknown type {raw_kind!r}, read as text")
            kind = QuestionKind.TEXT
        return cls(
            id=str(record.get("id", "")),
            text=record.get("question_text") or "",
            kind=kind,
            display_order=int(record.get("display_order") or 0),
            is_required=bool(record.get("is_required")),
            options=list(options or []),
        )


@dataclass
class Answer:
    """A respondent's answer to one question: a chosen option or free text."""
    question_id: str
    option_id: Optional[str] = None
    text: Optional[str] = None

    def is_filled_for(self, question: Question) -> bool:
        if question.kind is QuestionKind.QCM:
            return bool(self.option_id)
        return bool((self.text or "").strip())

    def to_record(self, response_id: str) -> Dict[str, Any]:
        return {
            "response_id": response_id,
            "question_id": self.question_id,
            "option_id": self.option_id or None,
            "text_answer": self.text or None,
        }
