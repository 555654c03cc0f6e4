"""
Platform information, and the defines that are derived from it. These defines
are used to work around platform-specific bugs and limitations, and to let
shaders detect which glsl features are available.
"""


class PlatformInfo:
    """Information about the platform that shaders are assembled for.

    Parameters
    ----------
    gpu : str
        The GPU vendor, e.g. "nvidia", "intel", "amd" or "apple".
    shading_language : str
        The shading language, e.g. "glsl".
    shading_language_version : int
        The version of the shading language, e.g. 100 or 300.
    features : iterable of str
        The supported features, e.g. "glsl-frag-depth", "glsl-derivatives",
        "glsl-frag-data" and "glsl-texture-lod".
    """

    __slots__ = ["_gpu", "_shading_language", "_shading_language_version", "_features"]

    def __init__(
        self, gpu="", shading_language="glsl", shading_language_version=100, features=()
    ):
        self._gpu = str(gpu or "")
        self._shading_language = str(shading_language)
        self._shading_language_version = int(shading_language_version)
        self._features = frozenset(features)

    @property
    def gpu(self):
        return self._gpu

    @property
    def shading_language(self):
        return self._shading_language

    @property
    def shading_language_version(self):
        return self._shading_language_version

    @property
    def features(self):
        return self._features

    def __repr__(self):
        return f"<PlatformInfo gpu={self._gpu!r} {self._shading_language} {self._shading_language_version}>"


_gpu_defines = {
    "apple": """\
#define APPLE_GPU
// Apple optimizes away the calculation necessary for emulated fp64
#define FP64_CODE_ELIMINATION_WORKAROUND 1
#define FP32_TAN_PRECISION_WORKAROUND 1
// Intel GPU doesn't have full 32 bits precision in same cases, causes overflow
#define FP64_HIGH_BITS_OVERFLOW_WORKAROUND 1
""",
    "nvidia": """\
#define NVIDIA_GPU
// Nvidia optimizes away the calculation necessary for emulated fp64
#define FP64_CODE_ELIMINATION_WORKAROUND 1
""",
    "intel": """\
#define INTEL_GPU
// Intel optimizes away the calculation necessary for emulated fp64
#define FP64_CODE_ELIMINATION_WORKAROUND 1
// Intel's built-in 'tan' function doesn't have acceptable precision
#define FP32_TAN_PRECISION_WORKAROUND 1
// Intel GPU doesn't have full 32 bits precision in same cases, causes overflow
#define FP64_HIGH_BITS_OVERFLOW_WORKAROUND 1
""",
    "amd": """\
#define AMD_GPU
""",
}

_default_gpu_defines = """\
#define DEFAULT_GPU
// Prevent driver from optimizing away the calculation necessary for emulated fp64
#define FP64_CODE_ELIMINATION_WORKAROUND 1
// Software renderers' 'tan' function doesn't have acceptable precision
#define FP32_TAN_PRECISION_WORKAROUND 1
// If the GPU doesn't have full 32 bits precision, will causes overflow
#define FP64_HIGH_BITS_OVERFLOW_WORKAROUND 1
"""


def get_platform_shader_defines(platform_info):
    """Get the defines that describe the GPU of the given platform."""
    gpu = platform_info.gpu.lower() if platform_info else ""
    return _gpu_defines.get(gpu, _default_gpu_defines)


_version_defines = """\
#if (__VERSION__ > 120)

# define FEATURE_GLSL_DERIVATIVES
# define FEATURE_GLSL_DRAW_BUFFERS
# define FEATURE_GLSL_FRAG_DEPTH
# define FEATURE_GLSL_TEXTURE_LOD

#endif // __VERSION__
"""

# Feature name -> (extension, extra defines)
_feature_extensions = {
    "glsl-frag-depth": (
        "GL_EXT_frag_depth",
        "# define FEATURE_GLSL_FRAG_DEPTH\n# define gl_FragDepth gl_FragDepthEXT\n",
    ),
    "glsl-derivatives": (
        "GL_OES_standard_derivatives",
        "# define FEATURE_GLSL_DERIVATIVES\n",
    ),
    "glsl-frag-data": (
        "GL_EXT_draw_buffers",
        "# define FEATURE_GLSL_DRAW_BUFFERS\n",
    ),
    "glsl-texture-lod": (
        "GL_EXT_shader_texture_lod",
        "# define FEATURE_GLSL_TEXTURE_LOD\n",
    ),
}


def get_version_defines(platform_info):
    """Get the defines that make glsl 100 and glsl 300 shaders compatible,
    enabling the extensions for the features that the platform supports.
    """
    text = _version_defines
    features = platform_info.features if platform_info else frozenset()
    for feature, (extension, defines) in _feature_extensions.items():
        if feature in features:
            text += f"\n#ifdef {extension}\n#extension {extension} : enable\n{defines}#endif\n"
    return text
