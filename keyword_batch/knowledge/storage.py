"""Storage for keywords and the articles and quizzes generated from them.

:class:`ContentStore` is the persistence boundary used by the pipeline.
:class:`JsonContentStore` keeps every table in one JSON document and commits
a transaction with a single atomic file replace, so either every staged row
lands or none does.
"""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, ContextManager, Iterator, List

from keyword_batch import paths

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Keyword:
    """A term articles are generated for."""

    id: int
    name: str
    description: str
    published_date: date | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "published_date": self.published_date.isoformat() if self.published_date else None,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Keyword":
        published = payload.get("published_date")
        return cls(
            id=int(payload["id"]),
            name=payload["name"],
            description=payload.get("description", ""),
            published_date=date.fromisoformat(published) if published else None,
        )


@dataclass(slots=True)
class Article:
    """One persisted article facet of a keyword."""

    id: int
    keyword_id: int
    title: str
    content: str
    summary: str
    published_at: date
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "keyword_id": self.keyword_id,
            "title": self.title,
            "content": self.content,
            "summary": self.summary,
            "published_at": self.published_at.isoformat(),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Article":
        return cls(
            id=int(payload["id"]),
            keyword_id=int(payload["keyword_id"]),
            title=payload["title"],
            content=payload["content"],
            summary=payload.get("summary", ""),
            published_at=date.fromisoformat(payload["published_at"]),
            created_at=datetime.fromisoformat(payload["created_at"]),
        )


@dataclass(slots=True)
class Quiz:
    """One persisted quiz item attached to an article."""

    id: int
    article_id: int
    question: str
    answer: str
    options: List[str] = field(default_factory=list)
    explanation: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "article_id": self.article_id,
            "question": self.question,
            "answer": self.answer,
            "options": list(self.options),
            "explanation": self.explanation,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Quiz":
        return cls(
            id=int(payload["id"]),
            article_id=int(payload["article_id"]),
            question=payload["question"],
            answer=str(payload["answer"]),
            options=list(payload.get("options", [])),
            explanation=payload.get("explanation", ""),
        )


class StoreTransaction(ABC):
    """Rows inserted through a transaction become visible together on commit."""

    @abstractmethod
    def insert_article(
        self,
        *,
        keyword_id: int,
        title: str,
        content: str,
        summary: str,
        published_at: date,
    ) -> Article:
        ...

    @abstractmethod
    def insert_quiz(
        self,
        *,
        article_id: int,
        question: str,
        answer: str,
        options: List[str],
        explanation: str,
    ) -> Quiz:
        ...


class ContentStore(ABC):
    """Persistence boundary for keywords, articles and quizzes."""

    @abstractmethod
    def get_keyword(self, keyword_id: int) -> Keyword | None:
        ...

    @abstractmethod
    def save_keyword(self, name: str, description: str, published_date: date | None = None) -> Keyword:
        ...

    @abstractmethod
    def has_articles(self, keyword_id: int) -> bool:
        ...

    @abstractmethod
    def list_articles(self, keyword_id: int) -> List[Article]:
        ...

    @abstractmethod
    def has_quizzes(self, keyword_id: int) -> bool:
        """True if any article of the keyword has a quiz."""

    @abstractmethod
    def list_quizzes(self, article_id: int) -> List[Quiz]:
        ...

    @abstractmethod
    def transaction(self) -> ContextManager[StoreTransaction]:
        """Open a scoped transaction.

        Usage:
            with store.transaction() as tx:
                tx.insert_article(...)
        """


class _JsonTransaction(StoreTransaction):
    def __init__(self, tables: dict[str, Any]):
        self.tables = tables
        self.articles: List[Article] = []
        self.quizzes: List[Quiz] = []

    def _next_id(self, table: str) -> int:
        sequences = self.tables["sequences"]
        sequences[table] = sequences.get(table, 0) + 1
        return sequences[table]

    def insert_article(
        self,
        *,
        keyword_id: int,
        title: str,
        content: str,
        summary: str,
        published_at: date,
    ) -> Article:
        article = Article(
            id=self._next_id("articles"),
            keyword_id=keyword_id,
            title=title,
            content=content,
            summary=summary,
            published_at=published_at,
        )
        self.tables["articles"].append(article.to_dict())
        self.articles.append(article)
        return article

    def insert_quiz(
        self,
        *,
        article_id: int,
        question: str,
        answer: str,
        options: List[str],
        explanation: str,
    ) -> Quiz:
        if not any(row["id"] == article_id for row in self.tables["articles"]):
            raise KeyError(f"Article {article_id} does not exist")
        quiz = Quiz(
            id=self._next_id("quizzes"),
            article_id=article_id,
            question=question,
            answer=answer,
            options=list(options),
            explanation=explanation,
        )
        self.tables["quizzes"].append(quiz.to_dict())
        self.quizzes.append(quiz)
        return quiz


class JsonContentStore(ContentStore):
    """Content store backed by a single JSON file.

    Every read loads the committed file. A transaction works on a private
    copy of the tables and replaces the file atomically only when its
    ``with`` block completes without an exception.
    """

    FILENAME = "contents.json"

    def __init__(self, root: Path | None = None) -> None:
        self.root = root or paths.get_data_root()
        self.root.mkdir(parents=True, exist_ok=True)
        self.path = self.root / self.FILENAME
        self._lock = threading.RLock()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {"sequences": {}, "keywords": [], "articles": [], "quizzes": []}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        data.setdefault("sequences", {})
        for table in ("keywords", "articles", "quizzes"):
            data.setdefault(table, [])
        return data

    def _write(self, data: dict[str, Any]) -> None:
        content = json.dumps(data, indent=2, ensure_ascii=False)
        # Local atomic write
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(content, encoding="utf-8")
        tmp_path.replace(self.path)

    def get_keyword(self, keyword_id: int) -> Keyword | None:
        for row in self._load()["keywords"]:
            if row["id"] == keyword_id:
                return Keyword.from_dict(row)
        return None

    def save_keyword(self, name: str, description: str, published_date: date | None = None) -> Keyword:
        with self._lock:
            data = self._load()
            sequences = data["sequences"]
            sequences["keywords"] = sequences.get("keywords", 0) + 1
            keyword = Keyword(
                id=sequences["keywords"],
                name=name,
                description=description,
                published_date=published_date,
            )
            data["keywords"].append(keyword.to_dict())
            self._write(data)
        logger.info("Saved keyword %d (%s)", keyword.id, keyword.name)
        return keyword

    def has_articles(self, keyword_id: int) -> bool:
        return any(row["keyword_id"] == keyword_id for row in self._load()["articles"])

    def list_articles(self, keyword_id: int) -> List[Article]:
        return [
            Article.from_dict(row)
            for row in self._load()["articles"]
            if row["keyword_id"] == keyword_id
        ]

    def has_quizzes(self, keyword_id: int) -> bool:
        data = self._load()
        article_ids = {row["id"] for row in data["articles"] if row["keyword_id"] == keyword_id}
        return any(row["article_id"] in article_ids for row in data["quizzes"])

    def list_quizzes(self, article_id: int) -> List[Quiz]:
        return [
            Quiz.from_dict(row)
            for row in self._load()["quizzes"]
            if row["article_id"] == article_id
        ]

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        with self._lock:
            tx = _JsonTransaction(self._load())
            try:
                yield tx
            except BaseException:
                logger.warning(
                    "Rolled back transaction (%d articles, %d quizzes staged)",
                    len(tx.articles),
                    len(tx.quizzes),
                )
                raise
            self._write(tx.tables)
            logger.debug(
                "Committed transaction (%d articles, %d quizzes)",
                len(tx.articles),
                len(tx.quizzes),
            )
