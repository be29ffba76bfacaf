"""
Utility functions for NYC congestion pipelines.
"""

from .logging import log_step, show_pipeline_table, clear_pipeline_log, get_pipeline_log

__all__ = ["log_step", "show_pipeline_table", "clear_pipeline_log", "get_pipeline_log"]
