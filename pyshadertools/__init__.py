"""Compose glsl shaders from reusable, dependency-linked shader modules."""

# ruff: noqa: F401

from ._version import __version__, version_info
from . import utils

from .errors import (
    ShaderAssemblyError,
    CyclicDependencyError,
    UnresolvedModuleError,
    InvalidInjectionKeyError,
    TranspileError,
)
from .injection import Injection, parse_injection_key
from .templating import register_glsl_loader
from .platform import PlatformInfo, get_platform_shader_defines, get_version_defines
from .transpiler import transpile_shader
from .modules import ShaderModule, ShaderModuleRegistry, resolve_modules
from .assembler import (
    assemble_shaders,
    assemble_get_uniforms,
    ShaderAssembler,
    AssembledShaders,
)

from .utils import logger
