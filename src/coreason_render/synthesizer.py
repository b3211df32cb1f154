# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_render

"""
Builds the script body that performs a render inside the browser.

Everything that runs in the browser lives in a separate context: only strings
and plain JSON values cross the boundary, so every dependency the markup needs
is re-imported there through the request's ``imports``. Dynamic ``import()``
is used instead of a ``<script>`` tag so the script can hand the container it
creates back through the completion callback.
"""

import json
from dataclasses import dataclass
from typing import Any

from coreason_render.models.request import RenderRequest


@dataclass(frozen=True)
class RendererLibraries:
    """Module URLs the browser loads the rendering library from."""

    react: str = "/node_modules/react.js"
    react_dom: str = "/node_modules/react-dom.js"


def synthesize_script(request: Any, libraries: RendererLibraries | None = None) -> str:
    """Produce the ``async () => {...}`` script body for a render request.

    The body expects a ``callback`` name in scope and calls it once with
    ``{container, coverage}`` after the renderer has committed.

    Args:
        request: A RenderRequest, a ``{code, imports}`` mapping or a code string.
        libraries: Where to load React and ReactDOM from.

    Returns:
        str: The script body, still containing markup syntax.

    Raises:
        InvalidRequestError: If the request is empty or malformed.
    """
    request = RenderRequest.coerce(request)
    libraries = libraries or RendererLibraries()

    lines = [
        "async () => {",
        f"const React = (await import({json.dumps(libraries.react)})).default;",
        f"const ReactDOM = (await import({json.dumps(libraries.react_dom)})).default;",
        *request.imports,
        'const container = document.createElement("container");',
        "document.body.appendChild(container);",
    ]

    if request.is_thunk:
        lines.append(f"const element = ({request.code})();")
    else:
        lines.append(f"const element = {request.code};")

    lines.append(
        "ReactDOM.render(element, container, "
        "() => callback({container: container, coverage: window.__coverage__}));"
    )
    lines.append("}")
    return "\n".join(lines)
