# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_render

"""Pydantic models of the Istanbul file-coverage record."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Position(BaseModel):
    # Some instrumenters emit empty positions for implicit branches.
    line: int | None = None
    column: int | None = None


class Range(BaseModel):
    start: Position = Field(default_factory=Position)
    end: Position = Field(default_factory=Position)


class FunctionMapping(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    decl: Range | None = None
    loc: Range
    line: int | None = None


class BranchMapping(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str | None = None
    loc: Range | None = None
    locations: list[Range]
    line: int | None = None


class FileCoverage(BaseModel):
    """
    Coverage for a single source file, in the shape instrumented pages expose
    under ``window.__coverage__``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    path: str
    statement_map: dict[str, Range] = Field(..., alias="statementMap")
    fn_map: dict[str, FunctionMapping] = Field(..., alias="fnMap")
    branch_map: dict[str, BranchMapping] = Field(..., alias="branchMap")
    s: dict[str, int]
    f: dict[str, int]
    b: dict[str, list[int]]
    hash: str | None = None
    input_source_map: dict[str, Any] | None = Field(default=None, alias="inputSourceMap")
    coverage_schema: str | None = Field(default=None, alias="_coverageSchema")

    def to_istanbul(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
