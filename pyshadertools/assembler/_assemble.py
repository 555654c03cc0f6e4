"""
Implements the assembly of shaders. Given the raw vertex and fragment source,
plus a list of modules and options, the assembler produces the final source
for both stages, and a function to compute the uniforms of all modules.
"""

from ..modules import resolve_modules
from ..platform import get_platform_shader_defines, get_version_defines
from ..transpiler import transpile_shader
from ..templating import render_template
from ..utils import hash_from_value
from ..utils.cache import ShaderCache
from ._defines import merge_defines, get_application_defines
from ._injections import (
    DECLARATION_INJECT_MARKER,
    normalize_injections,
    classify_injections,
    inject_shader,
)
from ._hooks import normalize_hook_functions, get_hook_functions


INJECT_SHADER_DECLARATIONS = f"\n\n{DECLARATION_INJECT_MARKER}\n\n"

SHADER_TYPE = {"vs": "vertex", "fs": "fragment"}

# Precision prologue to inject before functions are injected in the fragment shader
FRAGMENT_SHADER_PROLOGUE = "precision highp float;\n\n"

OLDEST_GLSL_VERSION = 100


class AssembledShaders:
    """The result of assembling shaders. Holds the final vertex and fragment
    source, and the combined ``get_uniforms()`` of all modules.
    """

    __slots__ = ["_vs", "_fs", "_get_uniforms", "_modules", "__weakref__"]

    def __init__(self, vs, fs, modules):
        self._vs = vs
        self._fs = fs
        self._modules = tuple(modules)
        self._get_uniforms = assemble_get_uniforms(self._modules)

    def __repr__(self):
        names = ", ".join(m.name for m in self._modules)
        return f"<AssembledShaders with modules [{names}] at {hex(id(self))}>"

    @property
    def vs(self):
        """The final vertex shader source."""
        return self._vs

    @property
    def fs(self):
        """The final fragment shader source."""
        return self._fs

    @property
    def modules(self):
        """The resolved modules, in dependency order."""
        return self._modules

    def get_uniforms(self, options=None):
        """Compute the uniforms of all modules for the given options."""
        return self._get_uniforms(options)


def assemble_get_uniforms(modules):
    """Get a function that combines the ``get_uniforms()`` of all modules.

    The options are passed to each module, together with the uniforms
    produced so far. The modules must be in resolution order, so that
    each module has access to the uniforms produced by its dependencies.
    Later modules override earlier ones.
    """
    modules = tuple(modules)

    def get_uniforms(options=None):
        options = options or {}
        uniforms = {}
        for module in modules:
            uniforms.update(module.get_uniforms(options, dict(uniforms)))
        return uniforms

    return get_uniforms


def split_version_line(source):
    """Split the source in (version_line, glsl_version, body)."""
    if not isinstance(source, str):
        raise TypeError(f"Shader source must be a str, not {type(source)}")
    first_line, _, rest = source.partition("\n")
    if first_line.startswith("#version "):
        return first_line, 300, rest
    else:
        return f"#version {OLDEST_GLSL_VERSION}", OLDEST_GLSL_VERSION, source


def get_shader_name(id, source, stage):
    """Generate a SHADER_NAME define if an id is given and the source
    does not define one itself.
    """
    if id and isinstance(id, str) and "SHADER_NAME" not in source:
        return f"\n#define SHADER_NAME {id}_{SHADER_TYPE[stage]}\n\n"
    return ""


def get_shader_type(stage):
    return f"\n#define SHADER_TYPE_{SHADER_TYPE[stage].upper()}\n"


class ShaderAssembler:
    """Assembles shaders for a specific platform.

    The collaborators that the assembler depends on can be replaced.

    Parameters
    ----------
    platform_info : PlatformInfo | None
        The platform to produce shaders for.
    registry : ShaderModuleRegistry | None
        The registry to look up modules (and dependencies) that are given by name.
    transpile : callable
        A function ``f(source, target_version, is_vertex) -> str``.
    platform_defines : callable
        A function ``f(platform_info) -> str`` producing platform defines.
    version_defines : callable
        A function ``f(platform_info) -> str`` producing version compatibility defines.
    cache : bool
        Whether to reuse results for identical input. Default True.
    """

    def __init__(
        self,
        platform_info=None,
        *,
        registry=None,
        transpile=transpile_shader,
        platform_defines=get_platform_shader_defines,
        version_defines=get_version_defines,
        cache=True,
    ):
        self._platform_info = platform_info
        self._registry = registry
        self._transpile = transpile
        self._platform_defines = platform_defines
        self._version_defines = version_defines
        self._cache = ShaderCache()
        if not cache:
            self._cache.disable()

    @property
    def platform_info(self):
        return self._platform_info

    @property
    def registry(self):
        return self._registry

    @property
    def cache(self):
        """The cache of assembled shaders."""
        return self._cache

    def assemble(
        self,
        *,
        vs,
        fs,
        id=None,
        modules=(),
        defines=None,
        hook_functions=(),
        inject=None,
        transpile_to_oldest_version=False,
        prologue=True,
        logger=None,
    ):
        """Assemble the vertex and fragment shader, injecting the given modules.

        Parameters
        ----------
        vs : str
            The raw vertex shader source.
        fs : str
            The raw fragment shader source.
        id : str | None
            If given, a ``SHADER_NAME`` define is added to both stages.
        modules : list
            The requested modules (ShaderModule objects or registered names).
        defines : dict | None
            Application defines, overriding the defines of the modules.
        hook_functions : list
            Hook function declarations, see ``normalize_hook_functions()``.
        inject : dict | None
            Application injections (key -> str or dict with "content" and "order").
        transpile_to_oldest_version : bool
            Whether to transpile to glsl 100, regardless of the source version.
        prologue : bool
            Whether to add the prologue (defines and precision). Default True.
        logger : logging.Logger | None
            If given, modules check the sources for deprecated usage and report here.

        Returns an AssembledShaders object.
        """
        _, _, vs_body = split_version_line(vs)
        _, _, fs_body = split_version_line(fs)

        resolved = resolve_modules(modules or (), self._registry)
        injections = normalize_injections(inject)
        hook_function_map = normalize_hook_functions(hook_functions)

        if logger is not None:
            for module in resolved:
                module.check_deprecations(vs_body + "\n" + fs_body, logger)

        # The order of defines and injections affects the output
        key = hash_from_value(
            [
                vs,
                fs,
                id,
                list(resolved),
                list((defines or {}).items()),
                list(hook_functions or ()),
                list((inject or {}).items()),
                bool(transpile_to_oldest_version),
                bool(prologue),
            ]
        )
        result = self._cache.get(key)
        if result is not None:
            return result

        options = dict(
            id=id,
            modules=resolved,
            defines=defines,
            injections=injections,
            transpile_to_oldest_version=transpile_to_oldest_version,
            prologue=prologue,
        )
        result = AssembledShaders(
            self.assemble_shader("vs", vs, hook_functions=hook_function_map["vs"], **options),
            self.assemble_shader("fs", fs, hook_functions=hook_function_map["fs"], **options),
            resolved,
        )
        self._cache.set(key, result)
        return result

    def assemble_shader(
        self,
        stage,
        source,
        *,
        modules,
        id=None,
        defines=None,
        injections=(),
        hook_functions=None,
        transpile_to_oldest_version=False,
        prologue=True,
    ):
        """Get the complete source for a single stage ("vs" or "fs"),
        adding the prologue, the module sources, the hook functions and all
        injections. The modules must already be resolved.
        """
        if stage not in SHADER_TYPE:
            raise ValueError(f"Invalid shader stage {stage!r}.")
        is_vertex = stage == "vs"

        version_line, glsl_version, core_source = split_version_line(source)

        all_defines = merge_defines(modules, defines)

        # Add platform defines (to work around platform-specific bugs and limitations),
        # common defines (glsl version compatibility), and the precision for fragment shaders.
        if prologue:
            assembled = (
                render_template(
                    "prologue.glsl",
                    shader_name=get_shader_name(id, source, stage),
                    shader_type=get_shader_type(stage),
                    platform_defines=self._platform_defines(self._platform_info),
                    version_defines=self._version_defines(self._platform_info),
                    application_defines=get_application_defines(all_defines),
                    precision="" if is_vertex else FRAGMENT_SHADER_PROLOGUE,
                )
                + "\n"
            )
        else:
            assembled = ""

        decl_injections, main_injections, hook_injections = classify_injections(
            injections, modules, stage
        )

        # Add source of the modules in resolved order
        for module in modules:
            assembled += module.get_module_source(stage, glsl_version)

        assembled += INJECT_SHADER_DECLARATIONS
        assembled = inject_shader(assembled, stage, decl_injections)

        assembled += get_hook_functions(hook_functions or {}, hook_injections)

        assembled += core_source

        # The version line is kept out of reach of the injections
        assembled = inject_shader(assembled, stage, main_injections)
        assembled = version_line + "\n" + assembled

        target_version = (
            OLDEST_GLSL_VERSION if transpile_to_oldest_version else glsl_version
        )
        return self._transpile(assembled, target_version, is_vertex)


def assemble_shaders(
    platform_info=None,
    *,
    registry=None,
    transpile=transpile_shader,
    platform_defines=get_platform_shader_defines,
    version_defines=get_version_defines,
    **options,
):
    """Inject a list of shader modules into shader sources. Returns an
    AssembledShaders object with ``vs``, ``fs`` and ``get_uniforms()``.

    See ``ShaderAssembler.assemble()`` for the supported options.
    """
    assembler = ShaderAssembler(
        platform_info,
        registry=registry,
        transpile=transpile,
        platform_defines=platform_defines,
        version_defines=version_defines,
        cache=False,
    )
    return assembler.assemble(**options)
