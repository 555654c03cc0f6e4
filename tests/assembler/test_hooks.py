from pytest import raises

from pyshadertools import ShaderModule
from pyshadertools.assembler import (
    normalize_hook_functions,
    normalize_injections,
    classify_injections,
    get_hook_functions,
)


def test_normalize_hook_string():
    hooks = normalize_hook_functions(["vs:get_position(vec3 position)", " fs:filter() "])

    hook = hooks["vs"]["vs:get_position"]
    assert hook.stage == "vs"
    assert hook.name == "get_position"
    assert hook.signature == "get_position(vec3 position)"
    assert hook.header == "" and hook.footer == ""

    hook = hooks["fs"]["fs:filter"]
    assert hook.name == "filter"
    assert hook.signature == "filter()"


def test_normalize_hook_dict():
    hooks = normalize_hook_functions(
        [
            {
                "hook": "fs:filter_color(inout vec4 color)",
                "header": "if (color.a == 0.0) discard;",
                "footer": "color.a = 1.0;",
            }
        ]
    )
    hook = hooks["fs"]["fs:filter_color"]
    assert hook.signature == "filter_color(inout vec4 color)"
    assert hook.header == "if (color.a == 0.0) discard;"
    assert hook.footer == "color.a = 1.0;"
    assert hooks["vs"] == {}


def test_normalize_hook_both_stages():
    hooks = normalize_hook_functions(
        [
            {
                "vs": "get_color(inout vec4 color)",
                "fs": {"hook": "fs:get_color(inout vec4 color)", "header": "// fs"},
            }
        ]
    )
    assert hooks["vs"]["vs:get_color"].signature == "get_color(inout vec4 color)"
    assert hooks["fs"]["fs:get_color"].signature == "get_color(inout vec4 color)"
    assert hooks["vs"]["vs:get_color"].header == ""
    assert hooks["fs"]["fs:get_color"].header == "// fs"


def test_normalize_hook_fails():
    assert normalize_hook_functions([]) == {"vs": {}, "fs": {}}
    assert normalize_hook_functions(None) == {"vs": {}, "fs": {}}

    for hook in [
        "get_position()",
        "xs:get_position()",
        "vs:",
        "vs:(vec3 p)",
        3,
        {},
        {"xs": "foo()"},
        {"header": "x"},
        {"vs": {"header": "x"}},
    ]:
        with raises(ValueError):
            normalize_hook_functions([hook])


def test_hook_without_injections():
    hooks = normalize_hook_functions(["vs:get_position(inout vec3 position)"])

    assert get_hook_functions(hooks["vs"], {}) == "void get_position(inout vec3 position) {\n}\n"
    assert get_hook_functions(hooks["fs"], {}) == ""

    hooks = normalize_hook_functions(
        [{"hook": "fs:filter(inout vec4 c)", "header": "// header", "footer": "// footer"}]
    )
    assert get_hook_functions(hooks["fs"], {}) == (
        "void filter(inout vec4 c) {\n  // header\n  // footer\n}\n"
    )


def test_hook_with_injections():
    hooks = normalize_hook_functions(
        [{"hook": "fs:filter(inout vec4 c)", "header": "// header", "footer": "// footer"}]
    )
    injections = normalize_injections(
        {"fs:filter": {"content": "c2();", "order": 2}, "vs:filter": "not_here();"}
    )
    a = ShaderModule("a", inject={"fs:filter": {"content": "c0();\nc0b();", "order": 0}})
    b = ShaderModule("b", inject={"fs:filter": {"content": "c1();", "order": 1}})
    _, _, hook_injections = classify_injections(injections, [a, b], "fs")

    assert get_hook_functions(hooks["fs"], hook_injections) == (
        "void filter(inout vec4 c) {\n"
        "  // header\n"
        "  c0();\n"
        "  c0b();\n"
        "  c1();\n"
        "  c2();\n"
        "  // footer\n"
        "}\n"
    )


def test_hook_equal_order():
    hooks = normalize_hook_functions(["vs:get_position(inout vec3 p)"])
    injections = normalize_injections({"vs:get_position": "app();"})
    a = ShaderModule("a", inject={"vs:get_position": "module_a();"})
    b = ShaderModule("b", inject={"vs:get_position": {"content": "first();", "order": -1}})
    _, _, hook_injections = classify_injections(injections, [a, b], "vs")

    code = get_hook_functions(hooks["vs"], hook_injections)
    assert code == (
        "void get_position(inout vec3 p) {\n  first();\n  app();\n  module_a();\n}\n"
    )


def test_hook_injections_for_undeclared_hooks_are_ignored():
    hooks = normalize_hook_functions(["vs:a()"])
    injections = normalize_injections({"vs:b": "b();"})
    _, _, hook_injections = classify_injections(injections, [], "vs")

    assert get_hook_functions(hooks["vs"], hook_injections) == "void a() {\n}\n"
