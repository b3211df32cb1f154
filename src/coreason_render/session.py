# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_render

from abc import ABC, abstractmethod
from typing import Any


class RemoteSession(ABC):
    """
    Abstract base class for remote browser sessions (e.g., local launch, CDP attach).
    Follows the Strategy Pattern.
    """

    @abstractmethod
    async def start(self) -> None:
        """Establish the session.

        Launches or attaches to a browser and opens the page scripts run in.

        Raises:
            SessionError: If the browser cannot be reached.
        """
        pass  # pragma: no cover

    @abstractmethod
    async def is_live(self) -> bool:
        """Report whether the page is open and the browser still connected."""
        pass  # pragma: no cover

    @abstractmethod
    async def navigate(self, url: str) -> None:
        """Load ``url`` in the session's page.

        Raises:
            SessionError: If navigation fails.
        """
        pass  # pragma: no cover

    @abstractmethod
    async def execute_async_script(self, script: str, arg: Any) -> Any:
        """Run an async script and await the value it resolves with.

        Args:
            script: A JS function expression taking one argument and returning a Promise.
            arg: JSON-serializable value passed to the function.

        Returns:
            Any: A driver handle to the resolved value.

        Raises:
            SessionError: If the session is gone.
            RemoteExecutionError: If the script throws or rejects.
            RenderTimeoutError: If the driver gives up waiting.
        """
        pass  # pragma: no cover

    @abstractmethod
    async def terminate(self) -> None:
        """Close the page and release the browser.

        Safe to call on a session that never started.
        """
        pass  # pragma: no cover
