# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_render

from typing import Literal

from playwright.async_api import Browser, Playwright

from coreason_render.sessions.base import PlaywrightSession
from coreason_render.utils.logger import logger


class LocalBrowserSession(PlaywrightSession):
    """
    Launches a browser on this machine for the lifetime of the session.
    """

    def __init__(
        self,
        browser: Literal["chromium", "firefox", "webkit"] = "chromium",
        headless: bool = True,
        args: list[str] | None = None,
        default_timeout: float = 30.0,
    ):
        super().__init__(default_timeout=default_timeout)
        self.browser_name = browser
        self.headless = headless
        self.args = args or []

    async def _connect(self, playwright: Playwright) -> Browser:
        logger.info(f"Launching {self.browser_name} (headless={self.headless})")
        browser_type = getattr(playwright, self.browser_name)
        browser: Browser = await browser_type.launch(headless=self.headless, args=self.args)
        return browser
