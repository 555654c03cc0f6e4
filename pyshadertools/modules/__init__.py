"""
Shader modules and their dependency resolution.

.. currentmodule:: pyshadertools.modules

.. autosummary::
    :toctree: modules/

    ShaderModule
    ShaderModuleRegistry
    resolve_modules

"""

from ._base import ShaderModule, UniformProp  # noqa: F401
from ._registry import ShaderModuleRegistry  # noqa: F401
from ._resolve import resolve_modules  # noqa: F401
