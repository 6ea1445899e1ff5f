"""Keyword content batch: search, crawl, rank and generate grounded articles."""

__version__ = "0.1.0"
