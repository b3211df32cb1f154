# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_render

from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RenderConfig(BaseSettings):
    """
    Configuration for the render environment.
    """

    session: Literal["local", "cdp"] = "local"
    browser: Literal["chromium", "firefox", "webkit"] = "chromium"
    headless: bool = True
    browser_args: list[str] = ["--disable-gpu"]

    # CDP attachment (session == "cdp")
    cdp_url: str | None = None

    # Page the synthesized scripts run in; dynamic imports resolve against it
    base_url: str | None = None
    render_timeout: float = 30.0

    # Module URLs of the rendering library, as served to the browser
    react_module: str = "/node_modules/react.js"
    react_dom_module: str = "/node_modules/react-dom.js"

    # Source transformer
    node_binary: str = "node"
    project_root: Path = Path(".")

    # Coverage
    collect_coverage: bool = True
    coverage_dir: Path = Path("coverage")
    coverage_reporters: set[Literal["json", "text", "lcov"]] = {"json", "text", "lcov"}

    # Optional module server started for the lifetime of the environment
    dev_server_command: list[str] | None = None
    dev_server_url: str | None = None
    dev_server_startup_timeout: float = 30.0

    model_config = SettingsConfigDict(
        env_prefix="COREASON_RENDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("render_timeout", "dev_server_startup_timeout")
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeouts must be positive")
        return value
