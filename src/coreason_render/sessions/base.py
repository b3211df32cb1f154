# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_render

from abc import abstractmethod
from typing import Any

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from coreason_render.exceptions import RemoteExecutionError, RenderTimeoutError, SessionError
from coreason_render.session import RemoteSession
from coreason_render.utils.logger import logger


class PlaywrightSession(RemoteSession):
    """Shared page handling for Playwright-driven sessions.

    Subclasses decide how the browser is obtained; everything after that
    (context, page, script execution, shutdown) lives here.
    """

    def __init__(self, default_timeout: float = 30.0):
        """Initializes the session.

        Args:
            default_timeout: Driver-level timeout in seconds for page operations.
        """
        self.default_timeout = default_timeout
        self.playwright: Playwright | None = None
        self.browser: Browser | None = None
        self.context: BrowserContext | None = None
        self.page: Page | None = None

    @abstractmethod
    async def _connect(self, playwright: Playwright) -> Browser:
        """Launch or attach to the browser."""
        pass  # pragma: no cover

    async def start(self) -> None:
        """Boot the browser and open a blank page.

        If a page is already open, the old session is terminated first.

        Raises:
            SessionError: If the browser cannot be launched or reached.
        """
        if self.page:
            logger.warning("Browser session already running. Terminating old session before restart.")
            await self.terminate()

        logger.info(f"Starting browser session ({type(self).__name__})")
        try:
            self.playwright = await async_playwright().start()
            self.browser = await self._connect(self.playwright)
            self.context = await self.browser.new_context()
            self.page = await self.context.new_page()
            self.page.set_default_timeout(self.default_timeout * 1000)
        except SessionError:
            await self.terminate()
            raise
        except PlaywrightError as e:
            logger.error(f"Failed to start browser session: {e}")
            await self.terminate()
            raise SessionError(f"Failed to start browser session: {e}") from e

        logger.info("Browser session started", browser=self.browser.browser_type.name)

    async def is_live(self) -> bool:
        if not self.page or not self.browser:
            return False
        return not self.page.is_closed() and self.browser.is_connected()

    async def navigate(self, url: str) -> None:
        page = self._require_page()
        logger.info(f"Navigating browser session to {url}")
        try:
            await page.goto(url)
        except PlaywrightError as e:
            raise SessionError(f"Failed to load {url}: {e}") from e

    async def execute_async_script(self, script: str, arg: Any) -> Any:
        page = self._require_page()
        try:
            return await page.evaluate_handle(script, arg)
        except PlaywrightTimeoutError as e:
            raise RenderTimeoutError(f"Browser did not call back: {e}") from e
        except PlaywrightError as e:
            if not await self.is_live():
                raise SessionError(f"Browser session lost during execution: {e}") from e
            raise RemoteExecutionError(str(e)) from e

    async def terminate(self) -> None:
        """Kill and cleanup the browser session.

        Each resource is released independently; failures are logged and skipped.
        """
        if not self.playwright:
            logger.warning("Attempted to terminate non-existent browser session")
            return

        logger.info(f"Terminating browser session ({type(self).__name__})")
        for resource in (self.page, self.context, self.browser):
            if resource is None:
                continue
            try:
                await resource.close()
            except PlaywrightError as e:
                logger.warning(f"Error closing {type(resource).__name__}: {e}")

        try:
            await self.playwright.stop()
        except Exception as e:
            logger.warning(f"Error stopping Playwright: {e}")
        finally:
            self.page = None
            self.context = None
            self.browser = None
            self.playwright = None

    def _require_page(self) -> Page:
        if not self.page or self.page.is_closed():
            raise SessionError("Browser session not started")
        return self.page
