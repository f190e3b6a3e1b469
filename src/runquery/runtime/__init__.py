"""
Runtime module - query run pipeline.
"""

from __future__ import annotations

from .assembler import ResponseAssembler
from .cost_path import (
    CostBoundedExecutionPath,
    CostEvaluation,
    CostEvaluator,
    CostValidationContext,
)
from .executor import DirectExecutionPath
from .formatter import INTERNAL_SERVER_ERROR, ErrorFormatter, default_format_error
from .log import LogEmitter
from .orchestrator import QueryRunner, get_default_runner, run_query

__all__ = [
    "LogEmitter",
    "ErrorFormatter",
    "default_format_error",
    "INTERNAL_SERVER_ERROR",
    "CostEvaluator",
    "CostEvaluation",
    "CostValidationContext",
    "CostBoundedExecutionPath",
    "DirectExecutionPath",
    "ResponseAssembler",
    "QueryRunner",
    "get_default_runner",
    "run_query",
]
