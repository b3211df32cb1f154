# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_render

import asyncio
from enum import Enum
from typing import Any
from uuid import uuid4

import anyio

from coreason_render.config import RenderConfig
from coreason_render.coverage import CoverageMap
from coreason_render.devserver import DevServer
from coreason_render.exceptions import EnvironmentClosedError, SessionError
from coreason_render.executor import RemoteExecutor
from coreason_render.factory import SessionFactory
from coreason_render.models import RenderRequest
from coreason_render.reporting import FileReportSink, ReportSink, finalize
from coreason_render.session import RemoteSession
from coreason_render.synthesizer import RendererLibraries, synthesize_script
from coreason_render.transformer import SourceTransformer
from coreason_render.utils.logger import logger


class EnvironmentState(str, Enum):
    UNINITIALIZED = "uninitialized"
    SETTING_UP = "setting_up"
    READY = "ready"
    TEARING_DOWN = "tearing_down"
    CLOSED = "closed"


class RenderEnvironment:
    """Renders markup in a remote browser on behalf of host-side tests.

    Owns the remote session, the run's coverage map and the registry of
    containers created by ``render``. One environment serves one test run;
    render calls against it are serialized.
    """

    def __init__(
        self,
        config: RenderConfig | None = None,
        session: RemoteSession | None = None,
        transformer: SourceTransformer | None = None,
        executor: RemoteExecutor | None = None,
        report_sink: ReportSink | None = None,
        dev_server: DevServer | None = None,
    ):
        """Initializes the RenderEnvironment.

        Args:
            config: Configuration for the environment.
            session: Optional pre-built session; created from config at setup otherwise.
            transformer: Source transformer; Babel by default.
            executor: Remote executor; uses ``config.render_timeout`` by default.
            report_sink: Where coverage reports go at teardown.
            dev_server: Optional module server; built from config at setup otherwise.
        """
        self.config = config or RenderConfig()
        self.environment_id = str(uuid4())
        self.transformer = transformer or SessionFactory.get_transformer(self.config)
        self.executor = executor or RemoteExecutor(default_timeout=self.config.render_timeout)
        self.report_sink = report_sink or FileReportSink(self.config.coverage_dir)
        self.libraries = RendererLibraries(
            react=self.config.react_module,
            react_dom=self.config.react_dom_module,
        )
        self._session = session
        self._dev_server = dev_server
        self._state = EnvironmentState.UNINITIALIZED
        self._coverage_map: CoverageMap | None = None
        self._containers: list[Any] = []
        self._lock = asyncio.Lock()

    @property
    def state(self) -> EnvironmentState:
        return self._state

    @property
    def session(self) -> RemoteSession | None:
        return self._session

    @property
    def coverage_map(self) -> CoverageMap | None:
        return self._coverage_map

    @property
    def containers(self) -> tuple[Any, ...]:
        return tuple(self._containers)

    async def __aenter__(self) -> "RenderEnvironment":
        await self.setup()
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        await self.teardown()

    async def setup(self) -> None:
        """Start the dev server and browser session and reset coverage.

        Raises:
            EnvironmentClosedError: If the environment was already torn down.
            SessionError: If the session or dev server cannot be brought up.
        """
        if self._state in (EnvironmentState.TEARING_DOWN, EnvironmentState.CLOSED):
            raise EnvironmentClosedError("Render environment is closed")
        if self._state is not EnvironmentState.UNINITIALIZED:
            logger.warning(f"Render environment already {self._state.value}; ignoring setup")
            return

        self._state = EnvironmentState.SETTING_UP
        logger.info("Setting up render environment", environment_id=self.environment_id)
        try:
            if self._dev_server is None:
                self._dev_server = SessionFactory.get_dev_server(self.config)
            if self._dev_server is not None:
                await self._dev_server.start()

            if self._session is None:
                self._session = SessionFactory.get_session(self.config)
            await self._session.start()
            if not await self._session.is_live():
                raise SessionError("Remote session did not come up")

            if self.config.base_url:
                await self._session.navigate(self.config.base_url)
        except Exception as e:
            logger.error(f"Render environment setup failed: {e}")
            await self._release()
            self._state = EnvironmentState.CLOSED
            if isinstance(e, SessionError):
                raise
            raise SessionError(f"Render environment setup failed: {e}") from e

        self._coverage_map = CoverageMap()
        self._containers = []
        self._state = EnvironmentState.READY
        logger.info("Render environment ready", environment_id=self.environment_id)

    def _check_ready(self) -> None:
        if self._state in (EnvironmentState.TEARING_DOWN, EnvironmentState.CLOSED):
            raise EnvironmentClosedError("Render environment is closed")
        if self._state is not EnvironmentState.READY:
            raise SessionError(f"Render environment is not ready ({self._state.value})")

    async def render(self, request: Any, timeout: float | None = None) -> Any:
        """Render markup in the browser and return the container it was mounted in.

        Args:
            request: A RenderRequest, a ``{code, imports}`` mapping or a bare code string.
            timeout: Seconds to wait for the browser; defaults to ``config.render_timeout``.

        Returns:
            Any: The driver's handle to the container element.

        Raises:
            EnvironmentClosedError: If the environment has been torn down.
            InvalidRequestError: If the request is malformed.
            CompileError: If the synthesized script does not compile.
            SessionError: If the browser session is unavailable.
            RemoteExecutionError: If the render throws in the browser.
            RenderTimeoutError: If the browser does not call back in time.
            MalformedCoverageError: If the page reports malformed coverage.
        """
        self._check_ready()
        request = RenderRequest.coerce(request)

        async with self._lock:
            # Teardown may have run while this call waited for the lock.
            self._check_ready()
            assert self._session is not None
            assert self._coverage_map is not None

            script = synthesize_script(request, self.libraries)
            compiled = await anyio.to_thread.run_sync(self.transformer.compile, script)
            result = await self.executor.execute(self._session, compiled, timeout)

            self._containers.append(result.container)
            if self.config.collect_coverage:
                self._coverage_map.merge(result.coverage)

        logger.debug(
            "Rendered element",
            environment_id=self.environment_id,
            thunk=request.is_thunk,
            imports=len(request.imports),
        )
        return result.container

    async def dispose_containers(self) -> int:
        """Remove every rendered container from the document and release its handle.

        Returns:
            int: The number of containers disposed without error.
        """
        async with self._lock:
            return await self._dispose_containers()

    async def _dispose_containers(self) -> int:
        containers, self._containers = self._containers, []
        disposed = 0
        for container in containers:
            try:
                await container.evaluate("node => node.remove()")
                await container.dispose()
                disposed += 1
            except Exception as e:
                logger.warning(f"Failed to dispose container: {e}")
        return disposed

    async def teardown(self) -> None:
        """Write coverage reports, release the browser and stop the dev server.

        Report failures are logged and never prevent the session from being released.
        """
        if self._state is EnvironmentState.CLOSED:
            return
        if self._state is EnvironmentState.UNINITIALIZED:
            self._state = EnvironmentState.CLOSED
            return

        self._state = EnvironmentState.TEARING_DOWN
        logger.info("Tearing down render environment", environment_id=self.environment_id)

        async with self._lock:
            if self.config.collect_coverage and self._coverage_map is not None:
                try:
                    await finalize(self._coverage_map, self.config.coverage_reporters, self.report_sink)
                except Exception as e:
                    logger.error(f"Failed to write coverage reports: {e}")

            if self._containers:
                try:
                    if self._session is not None and await self._session.is_live():
                        await self._dispose_containers()
                except Exception as e:
                    logger.warning(f"Failed to dispose containers during teardown: {e}")
            self._containers = []

            await self._release()

        self._coverage_map = None
        self._state = EnvironmentState.CLOSED
        logger.info("Render environment closed", environment_id=self.environment_id)

    async def _release(self) -> None:
        if self._session is not None:
            try:
                await self._session.terminate()
            except Exception as e:
                logger.error(f"Error terminating remote session: {e}")
        if self._dev_server is not None:
            try:
                await self._dev_server.stop()
            except Exception as e:
                logger.error(f"Error stopping dev server: {e}")
