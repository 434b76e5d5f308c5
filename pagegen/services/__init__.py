from .content_memory import ContentMemory, ContentSnapshot
from .fallback import (
    estimate_generation_time,
    fallback_page_content,
    page_cache_key,
    primary_persona_label,
)
from .knowledge import KnowledgeLookup, StaticKnowledgeLookup, fetch_knowledge

__all__ = [
    "ContentMemory",
    "ContentSnapshot",
    "estimate_generation_time",
    "fallback_page_content",
    "page_cache_key",
    "primary_persona_label",
    "KnowledgeLookup",
    "StaticKnowledgeLookup",
    "fetch_knowledge",
]
