# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_render

from coreason_render.config import RenderConfig
from coreason_render.devserver import DevServer
from coreason_render.session import RemoteSession
from coreason_render.sessions.cdp import CDPBrowserSession
from coreason_render.sessions.local import LocalBrowserSession
from coreason_render.transformer import BabelTransformer, SourceTransformer


class SessionFactory:
    """
    Factory to create RemoteSession instances based on configuration.
    """

    @staticmethod
    def get_session(config: RenderConfig) -> RemoteSession:
        """
        Returns an instance of the configured RemoteSession.
        """
        if config.session == "local":
            return LocalBrowserSession(
                browser=config.browser,
                headless=config.headless,
                args=config.browser_args,
                default_timeout=config.render_timeout,
            )
        elif config.session == "cdp":
            if not config.cdp_url:
                raise ValueError("cdp_url must be set when session is 'cdp'")
            return CDPBrowserSession(
                cdp_url=config.cdp_url,
                default_timeout=config.render_timeout,
            )
        else:
            # This should be unreachable due to Pydantic validation, but for safety:
            raise ValueError(f"Unknown session: {config.session}")  # pragma: no cover

    @staticmethod
    def get_transformer(config: RenderConfig) -> SourceTransformer:
        return BabelTransformer(project_root=config.project_root, node_binary=config.node_binary)

    @staticmethod
    def get_dev_server(config: RenderConfig) -> DevServer | None:
        if not config.dev_server_command:
            return None
        url = config.dev_server_url or config.base_url
        if not url:
            raise ValueError("dev_server_url or base_url must be set to start a dev server")
        return DevServer(
            command=config.dev_server_command,
            url=url,
            cwd=config.project_root,
            startup_timeout=config.dev_server_startup_timeout,
        )
