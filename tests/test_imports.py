# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_render


def test_import_coreason_render_package() -> None:
    """Tests that the main application package is importable."""
    try:
        import coreason_render
        from coreason_render.environment import RenderEnvironment
        from coreason_render.session import RemoteSession
    except ImportError as e:
        raise AssertionError(f"Failed to import from the 'coreason_render' package: {e}") from e

    assert coreason_render.__version__
    assert RenderEnvironment is coreason_render.RenderEnvironment
    assert RemoteSession is coreason_render.RemoteSession
