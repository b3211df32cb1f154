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
Accumulated coverage for one test run.

Counters add up on every merge: merging the same snapshot twice counts its hits
twice, so each render must be merged exactly once.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from coreason_render.exceptions import MalformedCoverageError
from coreason_render.models import FileCoverage
from coreason_render.utils.logger import logger


@dataclass(frozen=True)
class Totals:
    total: int
    covered: int

    @property
    def pct(self) -> float:
        if self.total == 0:
            return 100.0
        return round(100.0 * self.covered / self.total, 2)


@dataclass(frozen=True)
class CoverageSummary:
    statements: Totals
    branches: Totals
    functions: Totals
    lines: Totals

    def __add__(self, other: "CoverageSummary") -> "CoverageSummary":
        def _add(a: Totals, b: Totals) -> Totals:
            return Totals(total=a.total + b.total, covered=a.covered + b.covered)

        return CoverageSummary(
            statements=_add(self.statements, other.statements),
            branches=_add(self.branches, other.branches),
            functions=_add(self.functions, other.functions),
            lines=_add(self.lines, other.lines),
        )


EMPTY_SUMMARY = CoverageSummary(*(Totals(0, 0) for _ in range(4)))


def parse_snapshot(snapshot: Any) -> dict[str, FileCoverage]:
    """Validate a raw ``window.__coverage__`` object.

    Raises:
        MalformedCoverageError: If the snapshot or any file record has the wrong shape.
    """
    if not isinstance(snapshot, dict):
        raise MalformedCoverageError(f"Coverage snapshot must be an object, got {type(snapshot).__name__}")

    parsed: dict[str, FileCoverage] = {}
    for key, record in snapshot.items():
        try:
            file_coverage = FileCoverage.model_validate(record)
        except ValidationError as e:
            raise MalformedCoverageError(f"Malformed coverage for {key}: {e}") from e
        parsed[file_coverage.path] = file_coverage
    return parsed


def line_hits(file_coverage: FileCoverage) -> dict[int, int]:
    """Hit count per line: the highest count of any statement starting on it."""
    lines: dict[int, int] = {}
    for key, location in file_coverage.statement_map.items():
        line = location.start.line
        if line is None:
            continue
        count = file_coverage.s.get(key, 0)
        if line not in lines or lines[line] < count:
            lines[line] = count
    return lines


def summarize(file_coverage: FileCoverage) -> CoverageSummary:
    branch_counts = [hits for counts in file_coverage.b.values() for hits in counts]
    lines = line_hits(file_coverage)
    return CoverageSummary(
        statements=Totals(
            total=len(file_coverage.s),
            covered=sum(1 for hits in file_coverage.s.values() if hits > 0),
        ),
        branches=Totals(total=len(branch_counts), covered=sum(1 for hits in branch_counts if hits > 0)),
        functions=Totals(
            total=len(file_coverage.f),
            covered=sum(1 for hits in file_coverage.f.values() if hits > 0),
        ),
        lines=Totals(total=len(lines), covered=sum(1 for hits in lines.values() if hits > 0)),
    )


def _merge_file(existing: FileCoverage, incoming: FileCoverage) -> FileCoverage:
    statement_map = {**incoming.statement_map, **existing.statement_map}
    fn_map = {**incoming.fn_map, **existing.fn_map}
    branch_map = {**incoming.branch_map, **existing.branch_map}

    s = dict(existing.s)
    for key, hits in incoming.s.items():
        s[key] = s.get(key, 0) + hits

    f = dict(existing.f)
    for key, hits in incoming.f.items():
        f[key] = f.get(key, 0) + hits

    b = {key: list(counts) for key, counts in existing.b.items()}
    for key, counts in incoming.b.items():
        current = b.get(key, [])
        if len(current) < len(counts):
            current = current + [0] * (len(counts) - len(current))
        b[key] = [hits + (counts[i] if i < len(counts) else 0) for i, hits in enumerate(current)]

    return existing.model_copy(
        update={
            "statement_map": statement_map,
            "fn_map": fn_map,
            "branch_map": branch_map,
            "s": s,
            "f": f,
            "b": b,
        }
    )


class CoverageMap:
    """Coverage for every file seen during a test run, keyed by file path."""

    def __init__(self, data: dict[str, Any] | None = None):
        self._files: dict[str, FileCoverage] = {}
        if data:
            self.merge(data)

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def files(self) -> list[str]:
        return sorted(self._files)

    def file_coverage(self, path: str) -> FileCoverage:
        return self._files[path]

    def merge(self, snapshot: dict[str, Any] | None) -> None:
        """Fold one execution's snapshot into the map.

        The snapshot is validated in full before anything is merged, so a
        malformed snapshot leaves the map unchanged.

        Args:
            snapshot: A ``window.__coverage__`` object, or None for an uninstrumented page.

        Raises:
            MalformedCoverageError: If the snapshot has the wrong shape.
        """
        if snapshot is None:
            logger.debug("No coverage reported by the page; nothing to merge")
            return

        for path, incoming in parse_snapshot(snapshot).items():
            existing = self._files.get(path)
            self._files[path] = incoming if existing is None else _merge_file(existing, incoming)

    def summary(self) -> dict[str, CoverageSummary]:
        return {path: summarize(self._files[path]) for path in self.files()}

    def total(self) -> CoverageSummary:
        total = EMPTY_SUMMARY
        for file_summary in self.summary().values():
            total = total + file_summary
        return total

    def to_json(self) -> dict[str, Any]:
        return {path: self._files[path].to_istanbul() for path in self.files()}
