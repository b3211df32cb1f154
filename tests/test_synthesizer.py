import pytest

from coreason_render.exceptions import InvalidRequestError
from coreason_render.models import RenderRequest, default_import
from coreason_render.synthesizer import RendererLibraries, synthesize_script


def test_imports_preserved_in_order() -> None:
    imports = [
        'const Theme = (await import("./theme.js")).default;',
        'const Button = (await import("./button.js")).default;',
        "const styled = Button.withTheme(Theme);",
    ]
    script = synthesize_script(RenderRequest(code="<Button/>", imports=imports))
    lines = script.splitlines()

    positions = [lines.index(statement) for statement in imports]
    assert positions == sorted(positions)
    for statement in imports:
        assert lines.count(statement) == 1

    # Imports run after the renderer is bound and before the element is evaluated
    assert lines.index('const ReactDOM = (await import("/node_modules/react-dom.js")).default;') < positions[0]
    assert positions[-1] < lines.index("const element = <Button/>;")


def test_no_imports() -> None:
    script = synthesize_script(RenderRequest(code="<div/>"))
    lines = script.splitlines()
    assert lines[0] == "async () => {"
    assert lines[-1] == "}"
    assert len(lines) == 8


def test_thunk_is_invoked() -> None:
    script = synthesize_script(RenderRequest(code="() => <Expr/>"))
    assert "const element = (() => <Expr/>)();" in script


def test_expression_is_not_invoked() -> None:
    script = synthesize_script(RenderRequest(code="<Expr/>"))
    assert "const element = <Expr/>;" in script
    assert ")();" not in script


def test_thunk_with_leading_whitespace() -> None:
    script = synthesize_script(RenderRequest(code="  () => <Expr/>"))
    assert "const element = (  () => <Expr/>)();" in script


def test_thunk_detection_is_prefix_only() -> None:
    # Anything starting with the arrow prefix is treated as a thunk.
    request = RenderRequest(code="() => <A/> || <B/>")
    assert request.is_thunk
    assert RenderRequest(code="(() => <A/>)()").is_thunk is False


def test_container_and_callback() -> None:
    script = synthesize_script(RenderRequest(code="<Expr/>"))
    assert 'const container = document.createElement("container");' in script
    assert "document.body.appendChild(container);" in script
    assert (
        "ReactDOM.render(element, container, "
        "() => callback({container: container, coverage: window.__coverage__}));"
    ) in script


def test_custom_libraries() -> None:
    libraries = RendererLibraries(react="/vendor/react.mjs", react_dom="/vendor/react-dom.mjs")
    script = synthesize_script(RenderRequest(code="<Expr/>"), libraries)
    assert 'const React = (await import("/vendor/react.mjs")).default;' in script
    assert 'const ReactDOM = (await import("/vendor/react-dom.mjs")).default;' in script


def test_foo_bound_before_use() -> None:
    request = RenderRequest(code="<Foo/>", imports=[default_import("Foo", "./foo.js")])
    script = synthesize_script(request)
    binding = script.index('const Foo = (await import("./foo.js")).default;')
    assert binding < script.index("<Foo/>")


def test_accepts_mapping_and_string() -> None:
    from_mapping = synthesize_script({"code": "<Foo/>", "imports": ["const Foo = 1;"]})
    assert "const Foo = 1;" in from_mapping
    assert "const element = <Bar/>;" in synthesize_script("<Bar/>")


@pytest.mark.parametrize("code", ["", "   ", "\n"])
def test_empty_code_rejected(code: str) -> None:
    with pytest.raises(InvalidRequestError):
        synthesize_script({"code": code, "imports": []})


def test_non_string_import_rejected() -> None:
    with pytest.raises(InvalidRequestError):
        synthesize_script({"code": "<Foo/>", "imports": [42]})


def test_missing_code_rejected() -> None:
    with pytest.raises(InvalidRequestError):
        synthesize_script({"imports": []})


def test_unsupported_type_rejected() -> None:
    with pytest.raises(InvalidRequestError, match="Cannot build a render request"):
        synthesize_script(12)
