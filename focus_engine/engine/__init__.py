from focus_engine.engine.embeddings import EmbeddingClient, MockEmbeddingClient, OpenAIEmbeddingClient
from focus_engine.engine.errors import (
    EmbeddingError,
    FocusEngineError,
    InvalidQueryFormat,
    ModelError,
    NoInformationFound,
    ProviderFailure,
    UnknownFocusMode,
)
from focus_engine.engine.history import format_chat_history
from focus_engine.engine.llm import DemoMockLLMClient, LLMClient, MockLLMClient, OpenAILLMClient
from focus_engine.engine.models import (
    ChatTurn,
    Document,
    DocumentMetadata,
    EvaluationVerdict,
    EventEnvelope,
    EventType,
    OptimizationMode,
    RestaurantProfile,
    RestaurantRecord,
    SearchRequest,
)

__all__ = [
    "ChatTurn",
    "DemoMockLLMClient",
    "Document",
    "DocumentMetadata",
    "EmbeddingClient",
    "EmbeddingError",
    "EvaluationVerdict",
    "EventEnvelope",
    "EventType",
    "FocusEngineError",
    "InvalidQueryFormat",
    "LLMClient",
    "MockEmbeddingClient",
    "MockLLMClient",
    "ModelError",
    "NoInformationFound",
    "OpenAIEmbeddingClient",
    "OpenAILLMClient",
    "OptimizationMode",
    "ProviderFailure",
    "RestaurantProfile",
    "RestaurantRecord",
    "SearchRequest",
    "UnknownFocusMode",
    "format_chat_history",
]
