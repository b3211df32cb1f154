# src/coreason_render/models/__init__.py

"""
Data models for render requests, execution results and coverage records.
"""

from .coverage import FileCoverage
from .request import RenderRequest, default_import, named_import
from .result import CompiledScript, ExecutionResult

__all__ = [
    "CompiledScript",
    "ExecutionResult",
    "FileCoverage",
    "RenderRequest",
    "default_import",
    "named_import",
]
