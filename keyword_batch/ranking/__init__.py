from .bm25 import BM25Index, RankedResult, tokenize

__all__ = ["BM25Index", "RankedResult", "tokenize"]
