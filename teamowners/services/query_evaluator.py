"""
Per-request evaluation of ownership queries.

A query is a block of text with one identifier (typically a stack frame)
per line. Each line is reduced to a package name and looked up in the
registry; the result keeps the input line order. Rendering is left to the
caller (HTML page or JSON API).
"""
from __future__ import annotations

import logging
from typing import List, Optional

from teamowners.data.registry import TeamRegistry
from teamowners.domain.models import QueryElement, QueryResult
from teamowners.domain.package_resolver import resolve_package

logger = logging.getLogger(__name__)


def split_query(query: Optional[str]) -> List[str]:
    """
    Split a query into lines on line feeds.

    An absent or empty query has no lines. Otherwise every line feed
    separates two lines, so blank lines in the middle are kept.
    """
    if not query:
        return []
    return query.split("\n")


class QueryEvaluator:
    """
    Resolves every line of a query against a `TeamRegistry`.
    """

    def __init__(self, registry: TeamRegistry):
        self.registry = registry

    def evaluate_line(self, line: str) -> QueryElement:
        package = resolve_package(line)
        return QueryElement(package=package, matches=self.registry.lookup(package))

    def evaluate(self, query: Optional[str]) -> QueryResult:
        """
        Evaluate a multi-line query.

        `None` (no query given) and "" (empty query) both yield no elements,
        but stay distinguishable through `QueryResult.query`.
        """
        elements = [self.evaluate_line(line) for line in split_query(query)]
        logger.debug(f"Evaluated query with {len(elements)} lines")
        return QueryResult(query=query, elements=elements)
