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
pytest fixtures exposing the render entry point to test code.

One environment serves the whole test session, so coverage from every test is
merged into a single map and reported once when the session ends. Containers
are disposed after each test. Tests share the session's event loop:

    @pytest.mark.asyncio(loop_scope="session")
    async def test_greeting(render):
        container = await render(
            RenderRequest(code="<Foo>Hello</Foo>", imports=[default_import("Foo", "./foo.js")])
        )
        assert await container.inner_text() == "Hello"
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

import pytest
import pytest_asyncio

from coreason_render.config import RenderConfig
from coreason_render.environment import RenderEnvironment


@pytest.fixture(scope="session")
def render_config() -> RenderConfig:
    """Override (with session scope) to customise the environment used by ``render_environment``."""
    return RenderConfig()


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def render_environment(render_config: RenderConfig) -> AsyncIterator[RenderEnvironment]:
    async with RenderEnvironment(render_config) as environment:
        yield environment


@pytest_asyncio.fixture(loop_scope="session")
async def render(render_environment: RenderEnvironment) -> AsyncIterator[Callable[..., Awaitable[Any]]]:
    yield render_environment.render
    await render_environment.dispose_containers()
