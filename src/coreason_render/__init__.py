# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_render

"""
coreason-render
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .config import RenderConfig
from .coverage import CoverageMap
from .environment import EnvironmentState, RenderEnvironment
from .exceptions import (
    CompileError,
    EnvironmentClosedError,
    InvalidRequestError,
    MalformedCoverageError,
    RemoteExecutionError,
    RenderError,
    RenderTimeoutError,
    SessionError,
)
from .factory import SessionFactory
from .models import CompiledScript, ExecutionResult, RenderRequest, default_import, named_import
from .reporting import ReportFormat
from .session import RemoteSession
from .synthesizer import synthesize_script

__all__ = [
    "CompileError",
    "CompiledScript",
    "CoverageMap",
    "EnvironmentClosedError",
    "EnvironmentState",
    "ExecutionResult",
    "InvalidRequestError",
    "MalformedCoverageError",
    "RemoteExecutionError",
    "RemoteSession",
    "RenderConfig",
    "RenderEnvironment",
    "RenderError",
    "RenderRequest",
    "RenderTimeoutError",
    "ReportFormat",
    "SessionError",
    "SessionFactory",
    "default_import",
    "named_import",
    "synthesize_script",
]
