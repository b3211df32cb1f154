from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from coreason_render.models import CompiledScript

pytest_plugins = ["pytester"]

FOO_PATH = "/app/src/foo.js"


def make_coverage(path: str = FOO_PATH, s: tuple[int, ...] = (1, 0), f: int = 1, b: tuple[int, ...] = (1, 0)) -> dict[str, Any]:
    """An Istanbul file-coverage record with two statements, a function and an if/else branch."""
    return {
        "path": path,
        "statementMap": {
            "0": {"start": {"line": 1, "column": 0}, "end": {"line": 1, "column": 30}},
            "1": {"start": {"line": 3, "column": 2}, "end": {"line": 3, "column": 20}},
        },
        "fnMap": {
            "0": {
                "name": "Foo",
                "decl": {"start": {"line": 1, "column": 9}, "end": {"line": 1, "column": 12}},
                "loc": {"start": {"line": 1, "column": 0}, "end": {"line": 4, "column": 1}},
                "line": 1,
            }
        },
        "branchMap": {
            "0": {
                "type": "if",
                "loc": {"start": {"line": 2, "column": 2}, "end": {"line": 3, "column": 20}},
                "locations": [
                    {"start": {"line": 2, "column": 2}, "end": {"line": 3, "column": 20}},
                    {"start": {}, "end": {}},
                ],
                "line": 2,
            }
        },
        "s": {str(i): hits for i, hits in enumerate(s)},
        "f": {"0": f},
        "b": {"0": list(b)},
        "_coverageSchema": "1a1c01bbd47fc00a2c39e90264f33305004495a9",
        "hash": "abc123",
    }


def make_snapshot(*records: dict[str, Any]) -> dict[str, Any]:
    return {record["path"]: record for record in records}


def make_container() -> Any:
    container = MagicMock()
    container.evaluate = AsyncMock()
    container.dispose = AsyncMock()
    return container


def make_handle(container: Any, coverage: Any) -> Any:
    """A driver handle resolving to ``{container, coverage}``."""
    container_prop = MagicMock()
    container_prop.as_element.return_value = container
    coverage_prop = MagicMock()
    coverage_prop.json_value = AsyncMock(return_value=coverage)
    coverage_prop.dispose = AsyncMock()

    handle = MagicMock()
    handle.get_property = AsyncMock(
        side_effect=lambda name: {"container": container_prop, "coverage": coverage_prop}[name]
    )
    handle.dispose = AsyncMock()
    return handle


@pytest.fixture
def sample_snapshot() -> dict[str, Any]:
    return make_snapshot(make_coverage())


@pytest.fixture
def container() -> Any:
    return make_container()


@pytest.fixture
def mock_session(container: Any, sample_snapshot: dict[str, Any]) -> Any:
    session = MagicMock()
    session.start = AsyncMock()
    session.terminate = AsyncMock()
    session.navigate = AsyncMock()
    session.is_live = AsyncMock(return_value=True)
    session.execute_async_script = AsyncMock(return_value=make_handle(container, sample_snapshot))
    return session


@pytest.fixture
def mock_transformer() -> Any:
    transformer = MagicMock()
    transformer.compile.side_effect = lambda body: CompiledScript(code=f"{body};")
    return transformer


@pytest.fixture
def mock_report_sink() -> Any:
    sink = MagicMock()
    sink.write = AsyncMock()
    return sink


@pytest.fixture
def coverage_record() -> Callable[..., dict[str, Any]]:
    return make_coverage


@pytest.fixture
def handle_factory() -> Callable[[Any, Any], Any]:
    return make_handle
