# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_render

"""Render request model and helpers for building import statements."""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from coreason_render.exceptions import InvalidRequestError

THUNK_PREFIX = "() =>"


def default_import(name: str, module: str) -> str:
    """Bind ``name`` to the default export of ``module`` inside the browser."""
    return named_import(name, module, export="default")


def named_import(name: str, module: str, export: str | None = None) -> str:
    """Bind ``name`` to an export of ``module`` (defaults to the same name).

    Produces the statement form used by the render transform, e.g.
    ``const Foo = (await import("./foo.js")).default;``.
    """
    if not name.isidentifier():
        raise InvalidRequestError(f"Not a valid binding name: {name!r}")
    if not module:
        raise InvalidRequestError("Module specifier is required")
    return f"const {name} = (await import({json.dumps(module)})).{export or name};"


class RenderRequest(BaseModel):
    """
    Describes one render: a markup expression and the statements that bind its dependencies.

    ``code`` is either an element expression (``<Foo/>``) or a zero-argument thunk
    returning one (``() => <Foo/>``). ``imports`` run top-to-bottom before ``code``
    is evaluated; later statements may use names bound by earlier ones.
    Constructing a request with invalid fields raises ``InvalidRequestError``.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    code: str = Field(..., description="Markup expression or zero-argument thunk.")
    imports: list[str] = Field(
        default_factory=list,
        description="Statements binding the names `code` refers to, in execution order.",
    )

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise InvalidRequestError(f"Invalid render request: {e}") from e

    @field_validator("code")
    @classmethod
    def _code_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("code must not be empty")
        return value

    @property
    def is_thunk(self) -> bool:
        # Prefix match only: an expression that merely starts with "() =>" is
        # treated as a thunk too.
        return self.code.lstrip().startswith(THUNK_PREFIX)

    @classmethod
    def coerce(cls, value: Any) -> "RenderRequest":
        """Build a request from a request, a ``{code, imports}`` mapping or a code string."""
        if isinstance(value, RenderRequest):
            return value
        if isinstance(value, str):
            return cls(code=value)
        if isinstance(value, Mapping):
            if not all(isinstance(key, str) for key in value):
                raise InvalidRequestError("Render request keys must be strings")
            return cls(**value)
        raise InvalidRequestError(f"Cannot build a render request from {type(value).__name__}")
