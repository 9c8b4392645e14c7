from focus_engine.providers.interface import SearchProvider
from focus_engine.providers.registry import ProviderRegistry, ProviderResult
from focus_engine.providers.searxng import SearxngProvider, make_searxng_providers

__all__ = [
    "ProviderRegistry",
    "ProviderResult",
    "SearchProvider",
    "SearxngProvider",
    "make_searxng_providers",
]
