"""Focus modes and their immutable search configurations."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from focus_engine.engine.models import OptimizationMode
from focus_engine.prompts import WRITING_ASSISTANT_PROMPT, make_response_prompt, make_retriever_prompt


class FocusMode(str, Enum):
    WEB = "webSearch"
    ACADEMIC = "academicSearch"
    WRITING = "writingAssistant"
    WOLFRAM_ALPHA = "wolframAlphaSearch"
    YOUTUBE = "youtubeSearch"
    REDDIT = "redditSearch"
    RESTAURANT = "restaurantSearch"


class SearchConfig(BaseModel):
    """Per-mode pipeline settings; shared read-only by every request of the mode."""
    model_config = ConfigDict(frozen=True)

    active_engines: tuple[str, ...] = ()
    query_generator_prompt: str = ""
    response_prompt: str
    rerank: bool = True
    rerank_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    search_web: bool = True
    summarizer: bool = False
    # escalate to an error when every provider fetch failed
    require_results: bool = False


class OptimizationPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_queries: int
    results_per_engine: int
    max_context_documents: int


OPTIMIZATION_POLICIES: dict[OptimizationMode, OptimizationPolicy] = {
    OptimizationMode.SPEED: OptimizationPolicy(max_queries=1, results_per_engine=5, max_context_documents=8),
    OptimizationMode.BALANCED: OptimizationPolicy(max_queries=2, results_per_engine=10, max_context_documents=15),
    OptimizationMode.QUALITY: OptimizationPolicy(max_queries=3, results_per_engine=20, max_context_documents=25),
}


FOCUS_MODE_CONFIGS: dict[FocusMode, SearchConfig] = {
    FocusMode.WEB: SearchConfig(
        active_engines=(),
        query_generator_prompt=make_retriever_prompt(
            "web", "What is the capital of France?", "Capital of France",
        ),
        response_prompt=make_response_prompt(
            "a web search assistant",
            "Answer thoroughly using the web results in the context.",
        ),
        rerank=True,
        rerank_threshold=0.3,
        search_web=True,
        summarizer=True,
    ),
    FocusMode.ACADEMIC: SearchConfig(
        active_engines=("arxiv", "google scholar", "pubmed"),
        query_generator_prompt=make_retriever_prompt(
            "academic", "How does stable diffusion work?", "Stable diffusion working",
        ),
        response_prompt=make_response_prompt(
            "an academic research assistant",
            "Answer from the papers and abstracts in the context, noting where findings disagree.",
        ),
        rerank=True,
        rerank_threshold=0.0,
    ),
    FocusMode.WRITING: SearchConfig(
        response_prompt=WRITING_ASSISTANT_PROMPT,
        rerank=True,
        rerank_threshold=0.0,
        search_web=False,
    ),
    FocusMode.WOLFRAM_ALPHA: SearchConfig(
        active_engines=("wolframalpha",),
        query_generator_prompt=make_retriever_prompt(
            "computational", "What is the integral of x squared?", "Integral of x^2",
        ),
        response_prompt=make_response_prompt(
            "a computational knowledge assistant",
            "Answer using the Wolfram Alpha results in the context; show units and formulas.",
        ),
        rerank=False,
        rerank_threshold=0.0,
    ),
    FocusMode.YOUTUBE: SearchConfig(
        active_engines=("youtube",),
        query_generator_prompt=make_retriever_prompt(
            "video", "How does an A.C. work?", "A.C. working",
        ),
        response_prompt=make_response_prompt(
            "a video search assistant",
            "Answer from the YouTube video descriptions in the context.",
        ),
        rerank=True,
        rerank_threshold=0.3,
    ),
    FocusMode.REDDIT: SearchConfig(
        active_engines=("reddit",),
        query_generator_prompt=make_retriever_prompt(
            "Reddit", "Which is better, Node.js or Deno?", "Node.js vs Deno",
        ),
        response_prompt=make_response_prompt(
            "a Reddit discussion assistant",
            "Answer from the Reddit discussions in the context, separating opinions from facts.",
        ),
        rerank=True,
        rerank_threshold=0.3,
    ),
    FocusMode.RESTAURANT: SearchConfig(
        active_engines=("google", "bing"),
        query_generator_prompt=make_retriever_prompt(
            "restaurant", "Tell me about Chez Panisse in Berkeley", "Chez Panisse Berkeley menu reviews atmosphere",
        ),
        response_prompt=make_response_prompt(
            "a restaurant research assistant",
            "Collect every fact in the context about the restaurant's menu, cuisine, atmosphere and reviews.",
        ),
        rerank=True,
        rerank_threshold=0.3,
        summarizer=True,
    ),
}
