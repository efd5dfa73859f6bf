"""Application/UI layer package."""

from .facade import CaptureFacade, CaptureSummary, format_summary

__all__ = ["CaptureFacade", "CaptureSummary", "format_summary"]
