import asyncio

from pagegen.schemas.request import KnowledgeDocument
from pagegen.services.knowledge import StaticKnowledgeLookup, fetch_knowledge


DOCUMENTS = [
    KnowledgeDocument(id="1", content="Distributor performance dashboards for craft brewers"),
    KnowledgeDocument(id="2", content="Compliance reporting for spirits importers"),
    KnowledgeDocument(id="3", content="Craft brewers track distributor depletion trends daily"),
]


def test_static_lookup_ranks_by_overlap():
    lookup = StaticKnowledgeLookup(DOCUMENTS)
    results = asyncio.run(lookup.top_k_relevant("distributor depletion trends", 2))
    assert [doc.id for doc in results] == ["3", "1"]
    assert all(0 < doc.similarity_score <= 1 for doc in results)
    assert DOCUMENTS[0].similarity_score is None


def test_static_lookup_without_overlap():
    lookup = StaticKnowledgeLookup(DOCUMENTS)
    assert asyncio.run(lookup.top_k_relevant("weather tomorrow", 3)) == []
    assert asyncio.run(lookup.top_k_relevant("distributor", 0)) == []


class BrokenLookup:
    async def top_k_relevant(self, query, k):
        raise ConnectionError("vector store down")


def test_fetch_knowledge_degrades_to_empty(caplog):
    with caplog.at_level("WARNING"):
        assert asyncio.run(fetch_knowledge(BrokenLookup(), "anything", 3)) == []
    assert "Knowledge lookup failed" in caplog.text


def test_fetch_knowledge_without_lookup():
    assert asyncio.run(fetch_knowledge(None, "anything", 3)) == []
