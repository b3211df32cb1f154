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
from pathlib import Path

import httpx

from coreason_render.exceptions import SessionError
from coreason_render.utils.logger import logger


class DevServer:
    """
    Module server the browser page loads its scripts from.

    Runs ``command`` as a subprocess and waits until ``url`` answers over HTTP.
    """

    def __init__(
        self,
        command: list[str],
        url: str,
        cwd: Path = Path("."),
        startup_timeout: float = 30.0,
        poll_interval: float = 0.2,
    ):
        if not command:
            raise ValueError("Dev server command is required")
        self.command = command
        self.url = url
        self.cwd = cwd
        self.startup_timeout = startup_timeout
        self.poll_interval = poll_interval
        self.process: asyncio.subprocess.Process | None = None

    @property
    def running(self) -> bool:
        return self.process is not None and self.process.returncode is None

    async def start(self) -> None:
        """Start the server and wait for it to accept requests.

        Raises:
            SessionError: If the server exits early or does not answer in time.
        """
        logger.info(f"Starting dev server: {' '.join(self.command)}")
        try:
            self.process = await asyncio.create_subprocess_exec(
                *self.command,
                cwd=self.cwd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            raise SessionError(f"Failed to start dev server: {e}") from e

        try:
            await self._wait_until_ready()
        except SessionError:
            await self.stop()
            raise
        logger.info(f"Dev server ready at {self.url}")

    async def _wait_until_ready(self) -> None:
        deadline = time.monotonic() + self.startup_timeout
        async with httpx.AsyncClient() as client:
            while True:
                if not self.running:
                    raise SessionError("Dev server exited during startup")
                try:
                    await client.get(self.url, timeout=self.poll_interval * 5)
                    return
                except httpx.TransportError:
                    pass
                if time.monotonic() > deadline:
                    raise SessionError(f"Dev server did not answer at {self.url} within {self.startup_timeout}s")
                await asyncio.sleep(self.poll_interval)

    async def stop(self, grace_period: float = 5.0) -> None:
        """Terminate the server, killing it if it ignores SIGTERM."""
        if not self.running:
            self.process = None
            return
        assert self.process is not None
        logger.info("Stopping dev server")
        self.process.terminate()
        try:
            await asyncio.wait_for(self.process.wait(), timeout=grace_period)
        except asyncio.TimeoutError:
            logger.warning("Dev server ignored SIGTERM; killing it")
            self.process.kill()
            await self.process.wait()
        finally:
            self.process = None
