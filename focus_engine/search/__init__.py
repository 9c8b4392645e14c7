from focus_engine.search.interface import SearchHandler
from focus_engine.search.meta_search import MetaSearchAgent
from focus_engine.search.rerank import rerank_documents
from focus_engine.search.restaurant import RestaurantEvaluationAgent, parse_restaurant_query

__all__ = [
    "MetaSearchAgent",
    "RestaurantEvaluationAgent",
    "SearchHandler",
    "parse_restaurant_query",
    "rerank_documents",
]
