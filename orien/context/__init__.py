"""Prompt context assembly and cache breakpoints."""

from orien.context.assembler import AssembledContext, ContextAssembler, annotate_current_time
from orien.context.cache import (
    BreakpointPlan,
    BreakpointState,
    BreakpointStore,
    CacheBreakpointTracker,
    InMemoryBreakpointStore,
    apply_cache_control,
)

__all__ = [
    "AssembledContext",
    "BreakpointPlan",
    "BreakpointState",
    "BreakpointStore",
    "CacheBreakpointTracker",
    "ContextAssembler",
    "InMemoryBreakpointStore",
    "annotate_current_time",
    "apply_cache_control",
]
