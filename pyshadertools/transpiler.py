"""
A simple transpiler that converts glsl between the 100 and 300 es dialects,
using regular expressions. This is the default transpiler used by the
assembler. It handles the qualifiers of attributes and varyings, the texture
sampling functions, and the fragment shader output.
"""

import re

from .errors import TranspileError


def _variable_regex(qualifier):
    return re.compile(rf"\b{qualifier}[ \t]+(\w+[ \t]+\w+(\[\w+\])?;)")


ES300_REPLACEMENTS = [
    (re.compile(r"^(#version[ \t]+(100|300[ \t]+es))?[ \t]*\n"), "#version 300 es\n"),
    (re.compile(r"\btexture(2D|2DProj|Cube)Lod(EXT)?\("), "textureLod("),
    (re.compile(r"\btexture(2D|2DProj|Cube)(EXT)?\("), "texture("),
]

ES300_VERTEX_REPLACEMENTS = ES300_REPLACEMENTS + [
    (_variable_regex("attribute"), r"in \1"),
    (_variable_regex("varying"), r"out \1"),
]

ES300_FRAGMENT_REPLACEMENTS = ES300_REPLACEMENTS + [
    (_variable_regex("varying"), r"in \1"),
]

ES100_REPLACEMENTS = [
    (re.compile(r"^#version[ \t]+300[ \t]+es"), "#version 100"),
    (re.compile(r"\btexture(2D|2DProj|Cube)Lod\("), r"texture\1LodEXT("),
    (re.compile(r"\btexture\("), "texture2D("),
    (re.compile(r"\btextureLod\("), "texture2DLodEXT("),
]

ES100_VERTEX_REPLACEMENTS = ES100_REPLACEMENTS + [
    (_variable_regex("in"), r"attribute \1"),
    (_variable_regex("out"), r"varying \1"),
]

ES100_FRAGMENT_REPLACEMENTS = ES100_REPLACEMENTS + [
    (_variable_regex("in"), r"varying \1"),
]

ES100_FRAGMENT_OUTPUT_NAME = "gl_FragColor"
ES300_DEFAULT_OUTPUT_NAME = "fragmentColor"

re_es300_fragment_output = re.compile(r"\bout[ \t]+vec4[ \t]+(\w+)[ \t]*;\n?")
re_start_of_main = re.compile(r"void\s+main\s*\([^)]*\)\s*\{\n?")
re_es100_output = re.compile(rf"\b{ES100_FRAGMENT_OUTPUT_NAME}\b")


def transpile_shader(source, target_version, is_vertex):
    """Transpile the given glsl source to the target version (100 or 300)."""
    if not isinstance(source, str):
        raise TranspileError(f"Shader source must be a str, not {type(source)}")
    if target_version == 300:
        if is_vertex:
            return _convert(source, ES300_VERTEX_REPLACEMENTS)
        return _convert_fragment_to_300(source)
    elif target_version == 100:
        if is_vertex:
            return _convert(source, ES100_VERTEX_REPLACEMENTS)
        return _convert_fragment_to_100(source)
    else:
        raise TranspileError(f"Unknown GLSL version {target_version!r}")


def _convert(source, replacements):
    for regex, replacement in replacements:
        source = regex.sub(replacement, source)
    return source


def _convert_fragment_to_300(source):
    source = _convert(source, ES300_FRAGMENT_REPLACEMENTS)
    match = re_es300_fragment_output.search(source)
    if match:
        output_name = match.group(1)
    else:
        output_name = ES300_DEFAULT_OUTPUT_NAME
        if re_es100_output.search(source):
            source = re_start_of_main.sub(
                lambda m: f"out vec4 {output_name};\n{m.group(0)}", source, count=1
            )
    return re_es100_output.sub(output_name, source)


def _convert_fragment_to_100(source):
    source = _convert(source, ES100_FRAGMENT_REPLACEMENTS)
    match = re_es300_fragment_output.search(source)
    if match:
        output_name = match.group(1)
        source = re_es300_fragment_output.sub("", source, count=1)
        source = re.sub(rf"\b{output_name}\b", ES100_FRAGMENT_OUTPUT_NAME, source)
    return source
