# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_render

"""Exception hierarchy for render requests, remote execution and coverage."""


class RenderError(Exception):
    """Base class for every error raised by coreason-render."""


class InvalidRequestError(RenderError, ValueError):
    """The render request is malformed (empty code, non-string imports, ...)."""


class CompileError(RenderError):
    """The source transformer rejected the synthesized script."""


class SessionError(RenderError):
    """The remote browser session is missing, unreachable or disconnected."""


class RemoteExecutionError(RenderError):
    """The script threw inside the remote runtime before calling back."""


class RenderTimeoutError(RenderError, TimeoutError):
    """The remote runtime did not call back within the allowed time."""


class MalformedCoverageError(RenderError, ValueError):
    """A coverage snapshot does not have the Istanbul file-coverage shape."""


class EnvironmentClosedError(RenderError):
    """The render environment has been torn down."""
