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
import time
from typing import Any
from uuid import uuid4

from coreason_render.exceptions import RemoteExecutionError, RenderTimeoutError, SessionError
from coreason_render.models import CompiledScript, ExecutionResult
from coreason_render.session import RemoteSession
from coreason_render.utils.logger import logger

# Receives the compiled script as a string, turns it into a function with a
# `callback` parameter and resolves with whatever the script passes to it.
# A throw or rejection before the callback fires rejects the promise instead.
# Only the render holding the current token may resolve; a stale callback
# removes its own container.
EXECUTION_WRAPPER = """
({code, token}) => new Promise((resolve, reject) => {
  window.__coreasonRenderToken = token;
  const callback = (value) => {
    if (window.__coreasonRenderToken !== token) {
      if (value && value.container) value.container.remove();
      return;
    }
    resolve(value);
  };
  try {
    const func = new Function("callback", `return (${code})();`);
    Promise.resolve(func(callback)).catch(reject);
  } catch (e) {
    reject(e);
  }
})
"""

CANCEL_SCRIPT = """
(token) => {
  if (window.__coreasonRenderToken === token) window.__coreasonRenderToken = null;
}
"""

CANCEL_TIMEOUT = 5.0


class RemoteExecutor:
    """Runs compiled render scripts in a remote session and unpacks the result."""

    def __init__(self, default_timeout: float | None = None):
        self.default_timeout = default_timeout

    async def execute(
        self,
        session: RemoteSession,
        compiled: CompiledScript,
        timeout: float | None = None,
    ) -> ExecutionResult:
        """Execute a compiled script and wait for its completion callback.

        A timed-out render cannot be stopped in the browser: its script keeps
        running and may still mount a container later. The executor revokes the
        render's token on timeout, so a late callback removes that container
        instead of handing it back, but the element can be in the document
        until the late callback fires.

        Args:
            session: The live remote session.
            compiled: Output of the source transformer.
            timeout: Seconds to wait for the callback; falls back to the executor default.

        Returns:
            ExecutionResult: The container handle and coverage snapshot.

        Raises:
            SessionError: If the session is not live.
            RemoteExecutionError: If the script fails before calling back.
            RenderTimeoutError: If the callback does not fire in time.
        """
        if not await session.is_live():
            raise SessionError("Remote session is not live")

        # The compiled arrow expression ends with a statement terminator.
        code = compiled.code.rstrip().removesuffix(";")
        timeout = timeout if timeout is not None else self.default_timeout
        token = uuid4().hex

        start_time = time.time()
        try:
            handle = await asyncio.wait_for(
                session.execute_async_script(EXECUTION_WRAPPER, {"code": code, "token": token}),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, RenderTimeoutError) as e:
            await self._cancel(session, token)
            if isinstance(e, RenderTimeoutError):
                raise
            logger.warning(f"Render timed out after {timeout}s")
            raise RenderTimeoutError(f"Render exceeded {timeout} seconds limit.") from e
        duration = time.time() - start_time

        return await self._unpack(handle, duration)

    async def _cancel(self, session: RemoteSession, token: str) -> None:
        try:
            handle = await asyncio.wait_for(session.execute_async_script(CANCEL_SCRIPT, token), timeout=CANCEL_TIMEOUT)
            await handle.dispose()
        except Exception as e:
            logger.warning(f"Failed to cancel timed-out render: {e}")

    async def _unpack(self, handle: Any, duration: float) -> ExecutionResult:
        try:
            container = (await handle.get_property("container")).as_element()
            coverage_handle = await handle.get_property("coverage")
            try:
                coverage = await coverage_handle.json_value()
            finally:
                await coverage_handle.dispose()
        finally:
            await handle.dispose()

        if container is None:
            raise RemoteExecutionError("Render completed without a container element")
        if coverage is not None and not isinstance(coverage, dict):
            logger.warning(f"Ignoring coverage of unexpected type {type(coverage).__name__}")
            coverage = None

        logger.debug("Remote render finished", duration=round(duration, 4), instrumented=coverage is not None)
        return ExecutionResult(container=container, coverage=coverage, duration=duration)
