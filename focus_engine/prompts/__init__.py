from focus_engine.prompts.response import SUMMARIZER_PROMPT, WRITING_ASSISTANT_PROMPT, make_response_prompt
from focus_engine.prompts.restaurant import (
    RESTAURANT_EVALUATION_PROMPT,
    RESTAURANT_EXTRACTION_PROMPT,
    RESTAURANT_SEARCH_QUERY,
)
from focus_engine.prompts.retriever import make_retriever_prompt

__all__ = [
    "RESTAURANT_EVALUATION_PROMPT",
    "RESTAURANT_EXTRACTION_PROMPT",
    "RESTAURANT_SEARCH_QUERY",
    "SUMMARIZER_PROMPT",
    "WRITING_ASSISTANT_PROMPT",
    "make_response_prompt",
    "make_retriever_prompt",
]
