"""Utility functions and helpers."""

from .logger import set_log_level, setup_logger
from .io import load_json, save_json, save_results_csv

__all__ = ["setup_logger", "set_log_level", "load_json", "save_json", "save_results_csv"]
