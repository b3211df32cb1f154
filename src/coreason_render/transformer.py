# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_render

import json
import subprocess
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel

from coreason_render.exceptions import CompileError
from coreason_render.models import CompiledScript
from coreason_render.utils.logger import logger

# Reads the script body on stdin, the dialect options as argv[1], and writes a
# single JSON object ({code} or {error}) to stdout.
BABEL_DRIVER = r"""
const babel = require("@babel/core");
const options = JSON.parse(process.argv[1]);
let source = "";
process.stdin.setEncoding("utf8");
process.stdin.on("data", (chunk) => { source += chunk; });
process.stdin.on("end", () => {
  try {
    const {code} = babel.transformSync(source, {
      babelrc: false,
      configFile: false,
      presets: options.presets,
      plugins: options.plugins,
    });
    process.stdout.write(JSON.stringify({code}));
  } catch (e) {
    process.stdout.write(JSON.stringify({error: String(e && e.message || e)}));
  }
});
"""


class DialectOptions(BaseModel):
    """Syntax the transformer must understand in a synthesized script."""

    markup: bool = True
    dynamic_import: bool = True

    def to_babel(self) -> dict[str, list[str]]:
        presets = ["@babel/preset-react"] if self.markup else []
        plugins = ["@babel/plugin-syntax-dynamic-import"] if self.dynamic_import else []
        return {"presets": presets, "plugins": plugins}


class SourceTransformer(Protocol):
    """Compiles a synthesized script body into code the browser can run."""

    def compile(self, script_body: str) -> CompiledScript:
        """Compile ``script_body``.

        Raises:
            CompileError: If the body is not valid in the configured dialects.
        """
        ...


class BabelTransformer:
    """
    SourceTransformer backed by @babel/core, run in a node subprocess.

    Babel and its presets are resolved from ``project_root``'s node_modules.
    """

    def __init__(
        self,
        project_root: Path = Path("."),
        node_binary: str = "node",
        options: DialectOptions | None = None,
        timeout: float = 60.0,
    ):
        self.project_root = project_root
        self.node_binary = node_binary
        self.options = options or DialectOptions()
        self.timeout = timeout

    def compile(self, script_body: str) -> CompiledScript:
        cmd = [self.node_binary, "-e", BABEL_DRIVER, json.dumps(self.options.to_babel())]
        try:
            proc = subprocess.run(
                cmd,
                input=script_body,
                capture_output=True,
                text=True,
                cwd=self.project_root,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise CompileError(f"Node binary not found: {self.node_binary}") from e
        except subprocess.TimeoutExpired as e:
            raise CompileError(f"Babel did not finish within {self.timeout} seconds") from e

        if proc.returncode != 0:
            logger.error(f"Babel driver failed: {proc.stderr.strip()}")
            raise CompileError(f"Babel driver failed: {proc.stderr.strip()}")

        try:
            reply = json.loads(proc.stdout)
        except json.JSONDecodeError as e:
            raise CompileError(f"Unreadable Babel output: {proc.stdout[:200]!r}") from e

        if "error" in reply:
            raise CompileError(reply["error"])
        return CompiledScript(code=reply["code"])
