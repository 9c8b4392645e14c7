"""Parsing of the query-formulation model output."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

NOT_NEEDED = "not_needed"

_QUESTION_BLOCK = re.compile(r"<question>(.*?)</question>", re.DOTALL | re.IGNORECASE)
_LINKS_BLOCK = re.compile(r"<links>(.*?)</links>", re.DOTALL | re.IGNORECASE)


@dataclass
class FormulatedQuery:
    queries: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)

    @property
    def not_needed(self) -> bool:
        return not self.queries and not self.links


def parse_formulation(output: str, original_query: str, max_queries: int) -> FormulatedQuery:
    """Turn ``<question>``/``<links>`` output into search queries.

    Untagged output is read as the question itself; empty output falls back
    to ``original_query``. A lone ``not_needed`` disables searching.
    """
    links: list[str] = []
    links_match = _LINKS_BLOCK.search(output)
    if links_match:
        links = [
            line.strip() for line in links_match.group(1).splitlines()
            if line.strip().startswith(("http://", "https://"))
        ]
        output = output[: links_match.start()] + output[links_match.end():]

    question_match = _QUESTION_BLOCK.search(output)
    question_text = question_match.group(1) if question_match else output
    lines = [line.strip() for line in question_text.splitlines() if line.strip()]

    if len(lines) == 1 and lines[0].lower() == NOT_NEEDED:
        return FormulatedQuery(links=links)
    if not lines:
        lines = [original_query.strip()] if original_query.strip() else []
    return FormulatedQuery(queries=lines[:max(max_queries, 1)], links=links)
