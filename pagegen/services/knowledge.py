from __future__ import annotations

import logging
import re
from typing import List, Protocol, Sequence, runtime_checkable

from ..schemas.request import KnowledgeDocument

logger = logging.getLogger(__name__)


@runtime_checkable
class KnowledgeLookup(Protocol):
    async def top_k_relevant(self, query: str, k: int) -> List[KnowledgeDocument]:
        ...


_TOKEN = re.compile(r"[a-z0-9]+")


def _tokens(text: str) -> set[str]:
    return {token for token in _TOKEN.findall((text or "").lower()) if len(token) > 2}


class StaticKnowledgeLookup:
    """Ranks a fixed document list by token overlap with the query.

    Stands in for a vector store in local runs and tests; the similarity
    score is the Jaccard overlap of query and document tokens.
    """

    def __init__(self, documents: Sequence[KnowledgeDocument]) -> None:
        self._documents = list(documents)

    async def top_k_relevant(self, query: str, k: int) -> List[KnowledgeDocument]:
        query_tokens = _tokens(query)
        if not query_tokens or k <= 0:
            return []
        scored = []
        for document in self._documents:
            doc_tokens = _tokens(document.content)
            if not doc_tokens:
                continue
            overlap = len(query_tokens & doc_tokens)
            if not overlap:
                continue
            score = overlap / len(query_tokens | doc_tokens)
            scored.append(document.model_copy(update={"similarity_score": round(score, 4)}))
        scored.sort(key=lambda doc: doc.similarity_score or 0.0, reverse=True)
        return scored[:k]


async def fetch_knowledge(
    lookup: KnowledgeLookup | None,
    query: str,
    k: int,
) -> List[KnowledgeDocument]:
    """Query ``lookup``; lookup failures degrade to no context."""
    if lookup is None or k <= 0:
        return []
    try:
        return list(await lookup.top_k_relevant(query, k))
    except Exception:
        logger.warning("Knowledge lookup failed; generating without context", exc_info=True)
        return []


__all__ = ["KnowledgeLookup", "StaticKnowledgeLookup", "fetch_knowledge"]
