"""
Sparse (keyword) ranking using the BM25 Okapi algorithm.

Score(D, Q) = sum over query terms q present in D of
    IDF(q) * f(q, D) * (k1 + 1) / (f(q, D) + k1 * (1 - b + b * |D| / avgdl))

with IDF(q) = ln((N - n(q) + 0.5) / (n(q) + 0.5) + 1), where N is the number
of indexed documents and n(q) the number of documents containing q.

The index is built once from a small document collection and is immutable
afterwards apart from the IDF memo.
"""

from __future__ import annotations

import logging
import math
import re
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Sequence

from keyword_batch.parsing.web import RankableDocument

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"[^\w\s]")


def tokenize(text: str) -> List[str]:
    return _NON_WORD.sub(" ", text.lower()).split()


@dataclass(frozen=True)
class RankedResult:
    document: RankableDocument
    score: float


class BM25Index:
    def __init__(self, documents: Sequence[RankableDocument], k1: float = 1.5, b: float = 0.75):
        self.k1 = k1
        self.b = b
        self.documents: List[RankableDocument] = list(documents)
        # Statistics are kept per position so documents sharing a title stay distinct
        self.document_lengths: List[int] = []
        self.term_frequencies: List[Counter[str]] = []
        self.document_frequencies: Counter[str] = Counter()
        self._idf_cache: Dict[str, float] = {}

        total_length = 0
        for document in self.documents:
            tokens = tokenize(document.content)
            self.document_lengths.append(len(tokens))
            self.term_frequencies.append(Counter(tokens))
            self.document_frequencies.update(set(tokens))
            total_length += len(tokens)

        self.average_document_length = total_length / len(self.documents) if self.documents else 0.0
        logger.debug(
            "Indexed %d documents (avgdl=%.1f, vocabulary=%d)",
            len(self.documents),
            self.average_document_length,
            len(self.document_frequencies),
        )

    def __len__(self) -> int:
        return len(self.documents)

    def idf(self, term: str) -> float:
        cached = self._idf_cache.get(term)
        if cached is not None:
            return cached
        n = len(self.documents)
        df = self.document_frequencies.get(term, 0)
        value = math.log((n - df + 0.5) / (df + 0.5) + 1)
        self._idf_cache[term] = value
        return value

    def score(self, position: int, query_terms: Sequence[str]) -> float:
        """BM25 score of the document at ``position`` for ``query_terms``."""
        term_frequency = self.term_frequencies[position]
        if self.average_document_length > 0:
            length_ratio = self.document_lengths[position] / self.average_document_length
        else:
            length_ratio = 1.0

        score = 0.0
        for term in query_terms:
            tf = term_frequency.get(term, 0)
            if tf == 0:
                continue
            numerator = tf * (self.k1 + 1)
            denominator = tf + self.k1 * (1 - self.b + self.b * length_ratio)
            score += self.idf(term) * (numerator / denominator)
        return score

    def search(self, query: str, top_k: int = 7) -> List[RankedResult]:
        """Rank indexed documents against ``query``.

        Documents with no query term are left out. Equal scores keep the
        order the documents were indexed in.
        """
        query_terms = tokenize(query)
        scored = [
            RankedResult(document=document, score=self.score(position, query_terms))
            for position, document in enumerate(self.documents)
        ]
        ranked = sorted(scored, key=lambda result: result.score, reverse=True)
        return [result for result in ranked[:top_k] if result.score > 0]
