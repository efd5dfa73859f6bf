"""
Domain services.

These services plan and orchestrate capture runs while depending only on
domain models and ports so that infrastructure and CLI layers can remain
thin.
"""

from .cache import LookupCache
from .expanders import ResolutionExpander, ViewportExpander
from .naming import filenamify_url, render_filename
from .orchestrator import CaptureOrchestrator
from .planner import JobPlanner
from .sizes import POPULAR_RESOLUTIONS_KEYWORD, classify_sizes, is_literal_size
from .state import ProcessState

__all__ = [
    "CaptureOrchestrator",
    "JobPlanner",
    "ResolutionExpander",
    "ViewportExpander",
    "LookupCache",
    "ProcessState",
    "POPULAR_RESOLUTIONS_KEYWORD",
    "classify_sizes",
    "is_literal_size",
    "filenamify_url",
    "render_filename",
]
