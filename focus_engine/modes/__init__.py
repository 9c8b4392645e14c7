from focus_engine.modes.config import (
    FOCUS_MODE_CONFIGS,
    OPTIMIZATION_POLICIES,
    FocusMode,
    OptimizationPolicy,
    SearchConfig,
)

__all__ = [
    "FOCUS_MODE_CONFIGS",
    "OPTIMIZATION_POLICIES",
    "FocusMode",
    "OptimizationPolicy",
    "SearchConfig",
]
