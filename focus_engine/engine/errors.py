"""Error taxonomy for the search pipeline."""

from __future__ import annotations


class FocusEngineError(Exception):
    """Base class for all pipeline errors."""


class InvalidQueryFormat(FocusEngineError):
    """Input could not be parsed. Not retryable."""


class NoInformationFound(FocusEngineError):
    """Retrieval ran but produced nothing usable."""


class ProviderFailure(FocusEngineError):
    """A search provider failed.

    Normally recovered inside the fan-out; only raised for a whole request when
    every provider failed and the focus mode requires results.
    """


class EmbeddingError(FocusEngineError):
    """The embedding capability could not score documents."""


class ModelError(FocusEngineError):
    """The language model call or stream failed."""


class UnknownFocusMode(FocusEngineError, ValueError):
    pass
