"""Pipeline runner that generates articles and quizzes for one keyword.

For a keyword id the runner decides what work remains:

1. Nothing: articles and quizzes exist, fail with ContentsAlreadyExistError.
2. Quizzes only: articles exist but have no quizzes.
3. Everything: search the web, crawl and rank the results, generate five
   grounded articles with summaries, then quizzes for each article.

Articles and quizzes are each written in a single transaction, so a failed
run leaves either no articles or a full set of five. Re-running after a
failed quiz stage resumes at quiz generation.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Sequence, TypeVar

from keyword_batch.errors import (
    ContentsAlreadyExistError,
    KeywordNotFoundError,
    PublishDateMissingError,
)
from keyword_batch.integrations.llm.client import GenerationClient
from keyword_batch.knowledge.storage import Article, ContentStore, Keyword, Quiz
from keyword_batch.parsing.web import RankableDocument
from keyword_batch.prompts.articles import create_article_prompts, create_summary_prompt
from keyword_batch.prompts.quizzes import create_quizzes_prompt
from keyword_batch.prompts.schemas import (
    ARTICLE_SCHEMA,
    QUIZ_ARRAY_SCHEMA,
    ArticleDraft,
    QuizDraft,
    parse_quiz_array,
)
from keyword_batch.ranking.bm25 import BM25Index, RankedResult
from keyword_batch.search.brave import BraveSearchClient

from .config import BatchConfig
from .crawler import Crawler

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

OUTCOME_FULL = "full"
OUTCOME_QUIZZES_ONLY = "quizzes_only"


@dataclass
class PipelineResult:
    """Result of one ``generate_contents`` invocation.

    Attributes:
        keyword_id: The keyword processed.
        outcome: "full" or "quizzes_only".
        started_at: When the run started.
        completed_at: When the run finished.
        search_query: Query sent to the search API (full runs only).
        candidates: Number of search results crawled.
        documents_ranked: Documents indexed by BM25.
        grounding_documents: Ranked documents passed to the prompts.
        articles: Articles persisted by this run.
        quizzes: Quizzes persisted by this run.
    """

    keyword_id: int
    outcome: str = OUTCOME_FULL
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None
    search_query: str | None = None
    candidates: int = 0
    documents_ranked: int = 0
    grounding_documents: int = 0
    articles: List[Article] = field(default_factory=list)
    quizzes: List[Quiz] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        """Duration of the run in seconds."""
        if self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> dict:
        """Serialize to dictionary for logging/reporting."""
        return {
            "keyword_id": self.keyword_id,
            "outcome": self.outcome,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "search_query": self.search_query,
            "candidates": self.candidates,
            "documents_ranked": self.documents_ranked,
            "grounding_documents": self.grounding_documents,
            "articles_created": len(self.articles),
            "quizzes_created": len(self.quizzes),
        }

    def summary(self) -> str:
        """Generate a human-readable summary."""
        lines = [
            f"Keyword {self.keyword_id} completed in {self.duration_seconds:.1f}s",
            f"  Outcome: {self.outcome}",
        ]
        if self.outcome == OUTCOME_FULL:
            lines.extend([
                f"  Query: {self.search_query}",
                f"  Candidates crawled: {self.candidates}",
                f"  Documents ranked: {self.documents_ranked}",
                f"  Grounding documents: {self.grounding_documents}",
            ])
        lines.extend([
            f"  Articles created: {len(self.articles)}",
            f"  Quizzes created: {len(self.quizzes)}",
        ])
        return "\n".join(lines)


def build_search_query(keyword: Keyword) -> str:
    """Join the keyword name with the first sentence of its description."""
    first_sentence = keyword.description.split(".")[0].strip()
    return f"{keyword.name} {first_sentence}".strip()


def serialize_grounding(ranked: Sequence[RankedResult]) -> str:
    """Serialize ranked documents as the JSON reference block used in prompts."""
    return json.dumps([result.document.to_dict() for result in ranked], ensure_ascii=False)


def rank_documents(
    query: str,
    *,
    search: BraveSearchClient,
    crawler: Crawler,
    config: BatchConfig,
) -> tuple[List[RankedResult], int, int]:
    """Run search, crawl and BM25 ranking for ``query``.

    Crawled documents longer than ``config.max_text_length_for_ranking``
    characters are left out of the index.

    Returns:
        Tuple of (top ranked results, candidates crawled, documents indexed).
    """
    candidates = search.search(query)
    crawled = crawler.crawl_all(candidates)

    limit = config.max_text_length_for_ranking
    documents: List[RankableDocument] = [
        document.to_rankable() for document in crawled if document is not None
    ]
    documents = [document for document in documents if len(document.content) <= limit]

    index = BM25Index(documents)
    ranked = index.search(query, top_k=config.top_k)
    logger.info(
        "Ranked %d of %d crawled documents (%d candidates)",
        len(ranked),
        len(documents),
        len(candidates),
    )
    return ranked, len(candidates), len(documents)


class ContentPipeline:
    """Generates the article set and quizzes for a keyword.

    Usage:
        pipeline = ContentPipeline(store=store, search=search, crawler=crawler, generator=client)
        result = pipeline.generate_contents(42)
    """

    def __init__(
        self,
        *,
        store: ContentStore,
        search: BraveSearchClient,
        crawler: Crawler,
        generator: GenerationClient,
        config: BatchConfig | None = None,
    ):
        self.store = store
        self.search = search
        self.crawler = crawler
        self.generator = generator
        self.config = config or BatchConfig()

    def generate_contents(self, keyword_id: int) -> PipelineResult:
        """Generate whatever content the keyword is still missing.

        Raises:
            KeywordNotFoundError: If the keyword does not exist.
            ContentsAlreadyExistError: If articles and quizzes already exist.
            PublishDateMissingError: If articles are needed but the keyword has no publish date.
            SearchUnavailableError: If the search API fails.
            GenerationError: If any generation call fails.
        """
        logger.info("Starting content generation for keyword ID: %d", keyword_id)
        result = PipelineResult(keyword_id=keyword_id)

        keyword = self.store.get_keyword(keyword_id)
        if keyword is None:
            raise KeywordNotFoundError(keyword_id)

        if self.store.has_articles(keyword_id):
            if self.store.has_quizzes(keyword_id):
                logger.warning("Contents already exist for keyword ID: %d", keyword_id)
                raise ContentsAlreadyExistError(keyword_id)

            logger.info("Articles exist for keyword ID: %d, generating quizzes only", keyword_id)
            result.outcome = OUTCOME_QUIZZES_ONLY
            result.quizzes = self.generate_quizzes(keyword_id)
        else:
            if keyword.published_date is None:
                raise PublishDateMissingError(keyword_id)

            reference = self.collect_grounding(keyword, result)
            prompts = create_article_prompts(
                keyword.name,
                keyword.description,
                reference,
                self.config.output_language,
            )
            result.articles = self.generate_articles(keyword, prompts)
            result.quizzes = self.generate_quizzes(keyword_id)

        result.completed_at = datetime.now(timezone.utc)
        logger.info("Successfully completed content generation:\n%s", result.summary())
        return result

    def collect_grounding(self, keyword: Keyword, result: PipelineResult | None = None) -> str:
        """Search, crawl and rank pages for the keyword; return the JSON reference block."""
        query = build_search_query(keyword)
        logger.info("Search query for %s: %s", keyword.name, query)

        ranked, candidates, indexed = rank_documents(
            query,
            search=self.search,
            crawler=self.crawler,
            config=self.config,
        )
        if result is not None:
            result.search_query = query
            result.candidates = candidates
            result.documents_ranked = indexed
            result.grounding_documents = len(ranked)
        return serialize_grounding(ranked)

    def generate_articles(self, keyword: Keyword, prompts: Sequence[str]) -> List[Article]:
        """Generate, summarise and persist one article per prompt in a single transaction."""
        model = self.config.model
        language = self.config.output_language

        drafts = self._fan_out(
            lambda prompt: ArticleDraft.from_payload(
                self.generator.generate_object(prompt, ARTICLE_SCHEMA, model=model, schema_name="article")
            ),
            prompts,
        )
        summaries = self._fan_out(
            lambda draft: self.generator.generate_text(
                create_summary_prompt(draft.content, language), model=model
            ),
            drafts,
        )

        with self.store.transaction() as tx:
            articles = [
                tx.insert_article(
                    keyword_id=keyword.id,
                    title=draft.title,
                    content=draft.content,
                    summary=summary,
                    published_at=keyword.published_date,
                )
                for draft, summary in zip(drafts, summaries)
            ]

        logger.info("Persisted %d articles for keyword ID: %d", len(articles), keyword.id)
        return articles

    def generate_quizzes(self, keyword_id: int) -> List[Quiz]:
        """Generate quizzes for every article of the keyword and persist them in one transaction."""
        articles = self.store.list_articles(keyword_id)
        model = self.config.model
        language = self.config.output_language

        quiz_sets: List[List[QuizDraft]] = self._fan_out(
            lambda article: parse_quiz_array(
                self.generator.generate_object(
                    create_quizzes_prompt(article.content, language),
                    QUIZ_ARRAY_SCHEMA,
                    model=model,
                    schema_name="quizzes",
                )
            ),
            articles,
        )

        with self.store.transaction() as tx:
            quizzes = [
                tx.insert_quiz(
                    article_id=article.id,
                    question=draft.question,
                    answer=draft.answer,
                    options=draft.options,
                    explanation=draft.explanation,
                )
                for article, drafts in zip(articles, quiz_sets)
                for draft in drafts
            ]

        logger.info(
            "Persisted %d quizzes across %d articles for keyword ID: %d",
            len(quizzes),
            len(articles),
            keyword_id,
        )
        return quizzes

    def _fan_out(self, func: Callable[[T], R], items: Iterable[T]) -> List[R]:
        """Run ``func`` over ``items`` concurrently and wait for all of them.

        Results keep the order of ``items``. The first failure, in item
        order, is re-raised after every call has settled.
        """
        items = list(items)
        if not items:
            return []
        workers = min(self.config.generation_workers, len(items))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="generate") as executor:
            futures = [executor.submit(func, item) for item in items]
        return [future.result() for future in futures]


def build_pipeline(config: BatchConfig | None = None, store: ContentStore | None = None) -> ContentPipeline:
    """Wire a pipeline from project configuration and environment credentials."""
    from keyword_batch.config import get_config
    from keyword_batch.knowledge.storage import JsonContentStore
    from keyword_batch.parsing.robots import RobotsPolicyCache

    project = get_config()
    if config is None:
        config = BatchConfig(model=project.model, output_language=project.output_language)

    return ContentPipeline(
        store=store or JsonContentStore(project.data_root),
        search=BraveSearchClient(country=project.search_country, search_lang=project.search_lang),
        crawler=Crawler(robots=RobotsPolicyCache(config.robots), options=config.crawler),
        generator=GenerationClient(model=config.model),
        config=config,
    )
