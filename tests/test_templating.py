import jinja2
from pytest import raises

from pyshadertools import register_glsl_loader
from pyshadertools.templating import apply_templating, render_template


def test_templating():
    code = """
    $$ if foo
    x = {{bar}}
    $$ else
    x = {{bar + 1}}
    $$ endif
    """

    # Missing variables
    with raises(ValueError):
        apply_templating(code, foo=True)

    assert apply_templating(code, foo=True, bar=42).strip() == "x = 42"
    assert apply_templating(code, foo=False, bar=42).strip() == "x = 43"

    # Inline block notation
    code = """
    {$ if foo $} 1 {$ else $} 2 {$ endif $}
    """
    assert apply_templating(code, foo=True).strip() == "1"
    assert apply_templating(code, foo=False).strip() == "2"


def test_register_glsl_loader():
    register_glsl_loader("templatingtests1", {"a.glsl": "// from dict"})
    register_glsl_loader("templatingtests2", lambda name: f"// from func {name}")
    register_glsl_loader(
        "templatingtests3", jinja2.DictLoader({"c.glsl": "// from loader"})
    )

    code = """
    {$ include 'templatingtests1.a.glsl' $}
    {$ include 'templatingtests2.b.glsl' $}
    {$ include 'templatingtests3.c.glsl' $}
    """
    code = apply_templating(code)
    assert "// from dict" in code
    assert "// from func b.glsl" in code
    assert "// from loader" in code

    # Already registered
    with raises(RuntimeError):
        register_glsl_loader("templatingtests1", {})
    # Invalid context
    with raises(TypeError):
        register_glsl_loader("with.dot", {})
    with raises(TypeError):
        register_glsl_loader(3, {})
    # Invalid loader
    with raises(TypeError):
        register_glsl_loader("templatingtests4", "not a loader")


def test_builtin_templates():
    code = apply_templating("{$ include 'pyshadertools.constants.glsl' $}")
    assert "#define PI 3.14" in code

    code = render_template(
        "prologue.glsl",
        shader_name="",
        shader_type="T",
        platform_defines="P",
        version_defines="V",
        application_defines="A",
        precision="",
    )
    assert code == "\nT\nP\nV\nA\n"


def test_register_glsl_loader_directory(tmp_path):
    (tmp_path / "lighting.glsl").write_text("// from directory")
    register_glsl_loader("templatingtests5", tmp_path)

    code = apply_templating("{$ include 'templatingtests5.lighting.glsl' $}")
    assert code == "// from directory"

    with raises(TypeError):
        register_glsl_loader("", {})


def test_templating_errors():
    with raises(ValueError) as err:
        apply_templating("{$ include 'notregistered.x.glsl' $}", source_name="module 'm'")
    assert str(err.value) == (
        "Cannot compose shader module 'm': glsl snippet 'notregistered.x.glsl' not found."
    )

    with raises(ValueError) as err:
        apply_templating("$$ if foo\nx\n")
    assert str(err.value).startswith("Cannot compose shader: ")

    with raises(ValueError) as err:
        apply_templating("{{ missing }}", source_name="module 'm'")
    assert str(err.value).startswith("Cannot compose shader module 'm': ")
