"""MetaSearchAgent — query formulation, provider fan-out, rerank, streamed answer."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from contextlib import aclosing
from datetime import datetime, timezone
from typing import AsyncIterator, Sequence

from focus_engine.engine.embeddings import EmbeddingClient
from focus_engine.engine.errors import FocusEngineError, ModelError, ProviderFailure
from focus_engine.engine.history import format_chat_history
from focus_engine.engine.llm import LLMClient
from focus_engine.engine.models import ChatTurn, Document, DocumentMetadata, EventEnvelope, OptimizationMode
from focus_engine.engine.stream import event_stream, response, sources, status
from focus_engine.files.interface import FileStore
from focus_engine.modes.config import OPTIMIZATION_POLICIES, OptimizationPolicy, SearchConfig
from focus_engine.prompts import SUMMARIZER_PROMPT
from focus_engine.providers.links import LinkFetcher
from focus_engine.providers.registry import ProviderRegistry, ProviderResult
from focus_engine.search.interface import SearchHandler
from focus_engine.search.query import FormulatedQuery, parse_formulation
from focus_engine.search.rerank import rerank_documents
from focus_engine.tracing.interface import NullTraceCollector, TraceCollector

logger = logging.getLogger(__name__)


async def invoke_model(llm: LLMClient, prompt: str) -> str:
    try:
        return await llm.invoke(prompt)
    except FocusEngineError:
        raise
    except Exception as exc:
        raise ModelError(f"Language model call failed ({type(exc).__name__})") from exc


def format_context(documents: Sequence[Document]) -> str:
    """Number documents from 1 so the answer can cite them as ``[n]``."""
    blocks = []
    for i, doc in enumerate(documents, start=1):
        title = doc.metadata.title or doc.metadata.url or doc.metadata.engine
        blocks.append(f"[{i}] {title}\n{doc.content}")
    return "\n\n".join(blocks)


def dedupe_by_url(documents: Sequence[Document]) -> list[Document]:
    """First occurrence of each URL wins; URL-less documents are all kept."""
    seen: set[str] = set()
    unique: list[Document] = []
    for doc in documents:
        url = doc.metadata.url
        if url:
            if url in seen:
                continue
            seen.add(url)
        unique.append(doc)
    return unique


class MetaSearchAgent(SearchHandler):
    """One configured search pipeline. Public API::

        async for event in agent.search_and_answer(query, history, llm, embeddings):
            ...
    """

    def __init__(
        self,
        config: SearchConfig,
        providers: ProviderRegistry,
        file_store: FileStore | None = None,
        link_fetcher: LinkFetcher | None = None,
        trace_collector: TraceCollector | None = None,
    ) -> None:
        self._config = config
        self._providers = providers
        self._files = file_store
        self._links = link_fetcher or LinkFetcher()
        self._trace = trace_collector or NullTraceCollector()

    @property
    def config(self) -> SearchConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    def search_and_answer(
        self,
        query: str,
        history: Sequence[ChatTurn],
        llm: LLMClient,
        embeddings: EmbeddingClient,
        optimization_mode: OptimizationMode = OptimizationMode.BALANCED,
        files: Sequence[str] = (),
        trace_id: str | None = None,
    ) -> AsyncIterator[EventEnvelope]:
        trace_id = trace_id or str(uuid.uuid4())
        policy = OPTIMIZATION_POLICIES[OptimizationMode(optimization_mode)]
        producer = self._run(query, list(history), llm, embeddings, policy, list(files), trace_id)
        return event_stream(producer, trace_id, self._trace)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def _run(
        self,
        query: str,
        history: list[ChatTurn],
        llm: LLMClient,
        embeddings: EmbeddingClient,
        policy: OptimizationPolicy,
        files: list[str],
        trace_id: str,
    ) -> AsyncIterator[EventEnvelope]:
        chat_history = format_chat_history(history)
        documents: list[Document] = []

        if self._config.search_web:
            # 1. Formulate ------------------------------------------------
            yield status("Formulating search queries...")
            formulated = await self._formulate(query, chat_history, llm, policy, trace_id)

            if formulated.not_needed:
                logger.info("trace=%s search not needed", trace_id)
            else:
                # 2. Retrieve ---------------------------------------------
                if formulated.links and self._config.summarizer:
                    yield status(f"Reading {len(formulated.links)} linked page(s)...")
                    candidates = await self._summarize_links(formulated, llm, trace_id)
                else:
                    engines = self._providers.resolve_engines(self._config.active_engines)
                    yield status(f"Searching {', '.join(engines)}...")
                    candidates = await self._retrieve(engines, formulated.queries, policy, trace_id)

                if files and self._files is not None:
                    candidates.extend(await self._files.documents(files))

                # 3. Rerank -----------------------------------------------
                rerank_query = formulated.queries[0] if formulated.queries else query
                documents = await self._rerank(candidates, rerank_query, embeddings, trace_id)
                documents = documents[: policy.max_context_documents]
                yield sources(documents)

        # 4. Generate -----------------------------------------------------
        yield status("Generating answer...")
        async with aclosing(self._generate(query, chat_history, documents, llm, trace_id)) as chunks:
            async for chunk in chunks:
                yield response(chunk)

    async def _formulate(
        self,
        query: str,
        chat_history: str,
        llm: LLMClient,
        policy: OptimizationPolicy,
        trace_id: str,
    ) -> FormulatedQuery:
        t0 = time.time()
        prompt = self._config.query_generator_prompt.format(chat_history=chat_history, query=query)
        output = await invoke_model(llm, prompt)
        formulated = parse_formulation(output, query, policy.max_queries)
        await self._trace.emit(trace_id, "formulate", {
            "queries": formulated.queries,
            "links": formulated.links,
            "latency_ms": round((time.time() - t0) * 1000, 2),
        })
        return formulated

    async def _retrieve(
        self,
        engines: list[str],
        queries: list[str],
        policy: OptimizationPolicy,
        trace_id: str,
    ) -> list[Document]:
        results: list[ProviderResult] = await self._providers.fetch_all(
            engines, queries, limit=policy.results_per_engine,
        )
        for result in results:
            await self._trace.emit(trace_id, "retrieve", {
                "engine": result.engine,
                "query": result.query,
                "count": len(result.documents),
                "error": result.error,
                "latency_ms": result.latency_ms,
            })

        failed = [r for r in results if not r.ok]
        for result in failed:
            logger.warning("trace=%s provider %s failed: %s", trace_id, result.engine, result.error)
        if results and len(failed) == len(results) and self._config.require_results:
            raise ProviderFailure("All search providers failed")

        return dedupe_by_url([doc for r in results if r.ok for doc in r.documents])

    async def _summarize_links(self, formulated: FormulatedQuery, llm: LLMClient, trace_id: str) -> list[Document]:
        question = formulated.queries[0] if formulated.queries else "Summarize the page."

        async def summarize(url: str) -> Document | None:
            try:
                content, title = await self._links.fetch(url)
            except FocusEngineError as exc:
                logger.warning("trace=%s %s", trace_id, exc)
                return None
            if not content:
                return None
            summary = await invoke_model(
                llm, SUMMARIZER_PROMPT.format(query=question, url=url, content=content),
            )
            return Document(content=summary, metadata=DocumentMetadata(engine="link", url=url, title=title))

        summaries = await asyncio.gather(*(summarize(url) for url in formulated.links))
        documents = [d for d in summaries if d is not None]
        await self._trace.emit(trace_id, "summarize_links", {
            "links": len(formulated.links),
            "summarized": len(documents),
        })
        return documents

    async def _rerank(
        self,
        candidates: list[Document],
        query: str,
        embeddings: EmbeddingClient,
        trace_id: str,
    ) -> list[Document]:
        t0 = time.time()
        ranked = await rerank_documents(
            candidates,
            query,
            embeddings,
            threshold=self._config.rerank_threshold,
            enabled=self._config.rerank,
        )
        await self._trace.emit(trace_id, "rerank", {
            "enabled": self._config.rerank,
            "candidates": len(candidates),
            "kept": len(ranked),
            "latency_ms": round((time.time() - t0) * 1000, 2),
        })
        return ranked

    async def _generate(
        self,
        query: str,
        chat_history: str,
        documents: list[Document],
        llm: LLMClient,
        trace_id: str,
    ) -> AsyncIterator[str]:
        t0 = time.time()
        prompt = self._config.response_prompt.format(
            context=format_context(documents),
            chat_history=chat_history,
            query=query,
            date=datetime.now(timezone.utc).date().isoformat(),
        )
        chunks = 0
        try:
            async with aclosing(llm.stream(prompt)) as stream:
                async for chunk in stream:
                    if chunk:
                        chunks += 1
                        yield chunk
        except FocusEngineError:
            raise
        except Exception as exc:
            raise ModelError(f"Language model stream failed ({type(exc).__name__})") from exc
        await self._trace.emit(trace_id, "generate", {
            "documents": len(documents),
            "chunks": chunks,
            "latency_ms": round((time.time() - t0) * 1000, 2),
        })
