"""
Processing pipeline components.

This module provides the processor classes for a RegexSolve request. Each
processor implements one step of a mode's pipeline.
"""

from .base import Processor
from .batch_processor import BatchProcessor
from .match_processor import MatchProcessor
from .tool_processor import ToolProcessor

__all__ = [
    "BatchProcessor",
    "MatchProcessor",
    "Processor",
    "ToolProcessor",
]
