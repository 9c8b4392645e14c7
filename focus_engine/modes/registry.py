"""Focus-mode registry — maps a focus mode name to its configured handler."""

from __future__ import annotations

import logging
from typing import Mapping

from focus_engine.engine.errors import UnknownFocusMode
from focus_engine.files.interface import FileStore
from focus_engine.modes.config import FOCUS_MODE_CONFIGS, FocusMode, SearchConfig
from focus_engine.providers.links import LinkFetcher
from focus_engine.providers.registry import ProviderRegistry
from focus_engine.search.interface import SearchHandler
from focus_engine.search.meta_search import MetaSearchAgent
from focus_engine.search.restaurant import RestaurantEvaluationAgent
from focus_engine.tracing.interface import TraceCollector

logger = logging.getLogger(__name__)


class FocusRegistry:
    """Built once at startup and handed to the transport layer."""

    def __init__(self, handlers: Mapping[FocusMode, SearchHandler]) -> None:
        self._handlers = dict(handlers)

    @property
    def modes(self) -> list[FocusMode]:
        return list(self._handlers)

    def resolve(self, focus_mode: str | FocusMode) -> tuple[FocusMode, SearchHandler]:
        """Return ``(mode, handler)``; unknown or unregistered names raise ``UnknownFocusMode``."""
        try:
            mode = FocusMode(focus_mode)
        except ValueError:
            raise UnknownFocusMode(f"Invalid focus mode: {focus_mode!r}") from None
        handler = self._handlers.get(mode)
        if handler is None:
            raise UnknownFocusMode(f"Focus mode {mode.value!r} is not enabled")
        return mode, handler

    def restaurant_agent(self) -> RestaurantEvaluationAgent:
        _, handler = self.resolve(FocusMode.RESTAURANT)
        if not isinstance(handler, RestaurantEvaluationAgent):
            raise UnknownFocusMode("Restaurant evaluation is not configured")
        return handler


def build_focus_registry(
    providers: ProviderRegistry,
    configs: Mapping[FocusMode, SearchConfig] = FOCUS_MODE_CONFIGS,
    file_store: FileStore | None = None,
    link_fetcher: LinkFetcher | None = None,
    trace_collector: TraceCollector | None = None,
) -> FocusRegistry:
    handlers: dict[FocusMode, SearchHandler] = {}
    for mode, config in configs.items():
        missing = [e for e in config.active_engines if providers.get(e) is None]
        if missing:
            logger.warning("Focus mode %s references unregistered engines %s", mode.value, missing)
        agent = MetaSearchAgent(
            config,
            providers,
            file_store=file_store,
            link_fetcher=link_fetcher,
            trace_collector=trace_collector,
        )
        if mode is FocusMode.RESTAURANT:
            handlers[mode] = RestaurantEvaluationAgent(agent, trace_collector=trace_collector)
        else:
            handlers[mode] = agent
        logger.info("Registered focus mode %s", mode.value)
    return FocusRegistry(handlers)
