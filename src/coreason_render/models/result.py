# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_render

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CompiledScript:
    """Source text the remote runtime can execute directly."""

    code: str


@dataclass
class ExecutionResult:
    """
    Outcome of one remote render.

    ``container`` is the driver's handle to the DOM node created for the render;
    ``coverage`` is the page's raw coverage object, or None when the page is not
    instrumented.
    """

    container: Any
    coverage: dict[str, Any] | None
    duration: float
