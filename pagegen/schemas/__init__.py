from .intent import (
    ContentGuidelines,
    IntentClassificationResult,
    IntentLayoutStrategy,
    LayoutMode,
    LengthGuideline,
    SectionSpec,
    UserIntent,
)
from .page import (
    PAGE_TYPES,
    SECTION_TYPES,
    PageDocument,
    PageType,
    Section,
    SectionType,
)
from .request import (
    AttemptRecord,
    ChatTurnResult,
    ConversationTurn,
    GenerationResult,
    KnowledgeDocument,
    PageContext,
    PageGenerationRequest,
)

__all__ = [
    "UserIntent",
    "LayoutMode",
    "IntentClassificationResult",
    "SectionSpec",
    "IntentLayoutStrategy",
    "LengthGuideline",
    "ContentGuidelines",
    "PAGE_TYPES",
    "SECTION_TYPES",
    "PageType",
    "SectionType",
    "Section",
    "PageDocument",
    "KnowledgeDocument",
    "ConversationTurn",
    "PageContext",
    "PageGenerationRequest",
    "AttemptRecord",
    "GenerationResult",
    "ChatTurnResult",
]
