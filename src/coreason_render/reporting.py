# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_render

import json
from collections.abc import Iterable
from enum import Enum
from pathlib import Path
from typing import Protocol

import aiofiles  # type: ignore[import-untyped]

from coreason_render.coverage import CoverageMap, CoverageSummary, line_hits
from coreason_render.utils.logger import logger


class ReportFormat(str, Enum):
    JSON = "json"
    TEXT = "text"
    LCOV = "lcov"


REPORT_FILENAMES = {
    ReportFormat.JSON: "coverage-final.json",
    ReportFormat.TEXT: "coverage.txt",
    ReportFormat.LCOV: "lcov.info",
}


class ReportSink(Protocol):
    """Destination for finalized coverage reports."""

    async def write(self, report_format: ReportFormat, content: str) -> None:
        """Store one rendered report."""
        ...


class FileReportSink:
    """Writes each report to its conventional file name under ``directory``."""

    def __init__(self, directory: Path = Path("coverage"), echo_text: bool = True):
        """Initializes the FileReportSink.

        Args:
            directory: Where report files are written. Created on first write.
            echo_text: Also log the text table, as a console reporter would print it.
        """
        self.directory = directory
        self.echo_text = echo_text

    async def write(self, report_format: ReportFormat, content: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / REPORT_FILENAMES[report_format]
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(content)
        logger.info(f"Wrote {report_format.value} coverage report to {path}")
        if self.echo_text and report_format is ReportFormat.TEXT:
            logger.info(f"Coverage summary:\n{content}")


def _ranges(lines: list[int]) -> str:
    parts: list[str] = []
    start = prev = None
    for line in lines:
        if start is None:
            start = prev = line
        elif prev is not None and line == prev + 1:
            prev = line
        else:
            parts.append(f"{start}" if start == prev else f"{start}-{prev}")
            start = prev = line
    if start is not None:
        parts.append(f"{start}" if start == prev else f"{start}-{prev}")
    return ",".join(parts)


def render_json(coverage_map: CoverageMap) -> str:
    return json.dumps(coverage_map.to_json())


def render_text(coverage_map: CoverageMap) -> str:
    header = ["File", "% Stmts", "% Branch", "% Funcs", "% Lines", "Uncovered Line #s"]

    def _row(name: str, summary: CoverageSummary, uncovered: str) -> list[str]:
        return [
            name,
            f"{summary.statements.pct:g}",
            f"{summary.branches.pct:g}",
            f"{summary.functions.pct:g}",
            f"{summary.lines.pct:g}",
            uncovered,
        ]

    rows = [_row("All files", coverage_map.total(), "")]
    for path, summary in coverage_map.summary().items():
        hits = line_hits(coverage_map.file_coverage(path))
        uncovered = _ranges(sorted(line for line, count in hits.items() if count == 0))
        rows.append(_row(f" {path}", summary, uncovered))

    widths = [max(len(row[i]) for row in [header, *rows]) for i in range(len(header))]
    separator = "-|-".join("-" * width for width in widths)

    def _format(row: list[str]) -> str:
        cells = [row[0].ljust(widths[0])] + [cell.rjust(widths[i]) for i, cell in enumerate(row[1:-1], 1)]
        cells.append(row[-1].ljust(widths[-1]))
        return " | ".join(cells).rstrip()

    return "\n".join([separator, _format(header), separator, *map(_format, rows), separator]) + "\n"


def render_lcov(coverage_map: CoverageMap) -> str:
    out: list[str] = []
    for path in coverage_map.files():
        fc = coverage_map.file_coverage(path)
        out.append("TN:")
        out.append(f"SF:{path}")

        for key, meta in fc.fn_map.items():
            location = meta.decl or meta.loc
            out.append(f"FN:{location.start.line or meta.line or 0},{meta.name}")
        out.append(f"FNF:{len(fc.f)}")
        out.append(f"FNH:{sum(1 for hits in fc.f.values() if hits > 0)}")
        for key, meta in fc.fn_map.items():
            out.append(f"FNDA:{fc.f.get(key, 0)},{meta.name}")

        hits = line_hits(fc)
        for line in sorted(hits):
            out.append(f"DA:{line},{hits[line]}")
        out.append(f"LF:{len(hits)}")
        out.append(f"LH:{sum(1 for count in hits.values() if count > 0)}")

        branch_total = branch_hit = 0
        for key, counts in fc.b.items():
            meta = fc.branch_map.get(key)
            line = (meta.line if meta else None) or (meta.loc.start.line if meta and meta.loc else None) or 0
            for index, count in enumerate(counts):
                out.append(f"BRDA:{line},{key},{index},{count if count > 0 else '-'}")
                branch_total += 1
                branch_hit += 1 if count > 0 else 0
        out.append(f"BRF:{branch_total}")
        out.append(f"BRH:{branch_hit}")
        out.append("end_of_record")
    return "\n".join(out) + ("\n" if out else "")


RENDERERS = {
    ReportFormat.JSON: render_json,
    ReportFormat.TEXT: render_text,
    ReportFormat.LCOV: render_lcov,
}


async def finalize(
    coverage_map: CoverageMap,
    formats: Iterable[ReportFormat | str],
    sink: ReportSink,
) -> list[ReportFormat]:
    """Emit one report per requested format.

    Args:
        coverage_map: The run's accumulated coverage.
        formats: Report formats to produce (``json``, ``text``, ``lcov``).
        sink: Where the rendered reports go.

    Returns:
        list[ReportFormat]: The formats that were written, in emission order.

    Raises:
        ValueError: If a format is unknown.
    """
    requested = sorted({ReportFormat(f) for f in formats}, key=lambda f: f.value)
    logger.info("Finalizing coverage", files=len(coverage_map), formats=[f.value for f in requested])
    for report_format in requested:
        await sink.write(report_format, RENDERERS[report_format](coverage_map))
    return requested
