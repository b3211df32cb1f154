# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_render

import httpx
from playwright.async_api import Browser, Playwright

from coreason_render.exceptions import SessionError
from coreason_render.sessions.base import PlaywrightSession
from coreason_render.utils.logger import logger


class CDPBrowserSession(PlaywrightSession):
    """Attaches to an already running Chromium over the DevTools Protocol.

    The endpoint is probed over HTTP first so an unreachable browser fails fast
    with a SessionError instead of a driver-level connection timeout.
    """

    def __init__(
        self,
        cdp_url: str,
        default_timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(default_timeout=default_timeout)
        if not cdp_url:
            raise ValueError("cdp_url is required for a CDP session")
        self.cdp_url = cdp_url.rstrip("/")
        self._client = client

    async def _probe(self) -> None:
        if not self.cdp_url.startswith("http"):
            # ws:// endpoints expose no version document
            return
        url = f"{self.cdp_url}/json/version"
        try:
            if self._client is not None:
                response = await self._client.get(url, timeout=self.default_timeout)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(url, timeout=self.default_timeout)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"CDP endpoint {url} unreachable: {e}")
            raise SessionError(f"CDP endpoint {url} unreachable: {e}") from e
        logger.debug("CDP endpoint reachable", browser=response.json().get("Browser"))

    async def _connect(self, playwright: Playwright) -> Browser:
        await self._probe()
        logger.info(f"Attaching to browser at {self.cdp_url}")
        browser: Browser = await playwright.chromium.connect_over_cdp(self.cdp_url)
        return browser
