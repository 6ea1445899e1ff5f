"""JSON schemas for structured generation and their parsed forms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

from keyword_batch.errors import GenerationError

ARTICLE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "content": {"type": "string"},
    },
    "required": ["title", "content"],
    "additionalProperties": False,
}

QUIZ_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "question": {"type": "string"},
        "options": {"type": "array", "items": {"type": "string"}},
        "answer": {"type": "string"},
        "explanation": {"type": "string"},
    },
    "required": ["question", "options", "answer", "explanation"],
    "additionalProperties": False,
}

QUIZ_ARRAY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "quizzes": {"type": "array", "items": QUIZ_SCHEMA},
    },
    "required": ["quizzes"],
    "additionalProperties": False,
}


@dataclass(frozen=True)
class ArticleDraft:
    """A generated article before it receives a summary and an id."""

    title: str
    content: str

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ArticleDraft":
        title = payload.get("title")
        content = payload.get("content")
        if not isinstance(title, str) or not isinstance(content, str):
            raise GenerationError(f"Article payload missing title or content: {payload!r}")
        if not content.strip():
            raise GenerationError("Article payload has empty content")
        return cls(title=title.strip(), content=content.strip())


@dataclass(frozen=True)
class QuizDraft:
    """A generated quiz item."""

    question: str
    answer: str
    options: List[str] = field(default_factory=list)
    explanation: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "QuizDraft":
        question = payload.get("question")
        answer = payload.get("answer")
        if not isinstance(question, str) or not question.strip() or answer is None:
            raise GenerationError(f"Quiz payload missing question or answer: {payload!r}")
        options = payload.get("options") or []
        if not isinstance(options, list):
            raise GenerationError(f"Quiz options must be a list: {payload!r}")
        return cls(
            question=question.strip(),
            # Answers may come back as numbers or booleans
            answer=str(answer),
            options=[str(option) for option in options],
            explanation=str(payload.get("explanation") or ""),
        )


def parse_quiz_array(payload: dict[str, Any]) -> List[QuizDraft]:
    """Parse a ``QUIZ_ARRAY_SCHEMA`` reply into quiz drafts."""
    items = payload.get("quizzes")
    if not isinstance(items, list) or not items:
        raise GenerationError(f"Quiz payload missing 'quizzes' list: {payload!r}")
    if not all(isinstance(item, dict) for item in items):
        raise GenerationError(f"Quiz items must be objects: {payload!r}")
    return [QuizDraft.from_payload(item) for item in items]
