"""
This subpackage is where the glsl code is composed: modules are resolved,
defines are merged, injections are classified, hook functions are
synthesized, and everything is spliced together into the final source.

.. currentmodule:: pyshadertools.assembler

.. autosummary::
    :toctree: assembler/

    assemble_shaders
    ShaderAssembler
    AssembledShaders

"""

from ._assemble import (  # noqa: F401
    assemble_shaders,
    assemble_get_uniforms,
    ShaderAssembler,
    AssembledShaders,
)
from ._defines import merge_defines, get_application_defines  # noqa: F401
from ._injections import (  # noqa: F401
    DECLARATION_INJECT_MARKER,
    normalize_injections,
    classify_injections,
    inject_shader,
)
from ._hooks import HookFunction, normalize_hook_functions, get_hook_functions  # noqa: F401
