"""
Implements the shader module class. A shader module is a reusable bundle of
glsl code, defines, injections and uniform logic, that can depend on other
modules. Modules are immutable: once created, the assembler only reads them.
"""

import re
import numbers

import numpy as np

from ..utils import ReadOnlyDict, is_finite_number
from ..injection import STAGES, create_injection
from ..errors import InvalidInjectionKeyError
from ..templating import apply_templating


re_non_identifier = re.compile(r"[^0-9a-zA-Z]")


class UniformProp:
    """The declaration of a single uniform of a shader module."""

    __slots__ = ["name", "type", "value", "min", "max", "private"]

    def __init__(self, name, declaration):
        if isinstance(declaration, dict) and "value" in declaration:
            d = declaration
        else:
            d = {"value": declaration}
        self.name = name
        self.value = d["value"]
        self.type = d.get("type", None) or self._infer_type(self.value)
        self.min = d.get("min", None)
        self.max = d.get("max", None)
        self.private = bool(d.get("private", False))
        if self.type == "array" and self.value is not None:
            self.value = np.asarray(self.value, dtype=np.float32)

    @staticmethod
    def _infer_type(value):
        if isinstance(value, (bool, np.bool_)):
            return "boolean"
        elif isinstance(value, numbers.Number):
            return "number"
        elif isinstance(value, (list, tuple, np.ndarray)):
            return "array"
        else:
            return "object"

    def validate(self, value, module_name):
        """Check the given value and return it in its canonical form."""
        prefix = f"Shader module {module_name!r}: invalid uniform {self.name!r}"
        if self.type == "number":
            if not is_finite_number(value):
                raise ValueError(f"{prefix}, expected a finite number, got {value!r}")
            if self.min is not None and value < self.min:
                raise ValueError(f"{prefix}, {value} is smaller than {self.min}")
            if self.max is not None and value > self.max:
                raise ValueError(f"{prefix}, {value} is larger than {self.max}")
        elif self.type == "boolean":
            if not isinstance(value, (bool, np.bool_)):
                raise ValueError(f"{prefix}, expected a bool, got {value!r}")
        elif self.type == "array":
            try:
                value = np.asarray(value, dtype=np.float32)
            except (TypeError, ValueError):
                raise ValueError(f"{prefix}, expected an array, got {value!r}") from None
        return value


class ShaderModule:
    """A reusable, named and dependency-aware piece of a shader.

    Parameters
    ----------
    name : str
        The name of the module. Used to deduplicate modules and for the
        ``MODULE_<NAME>`` define that is emitted with its source.
    vs : str | callable | None
        The vertex shader code of this module. A string is treated as a
        template (rendered with ``glsl_version``, ``stage`` and ``defines``).
        A callable is called with the glsl version and must return a string.
    fs : str | callable | None
        The fragment shader code, like ``vs``.
    dependencies : list
        The modules this module depends on, as names or ShaderModule objects.
    defines : dict
        Defines that this module contributes.
    inject : dict
        Injections that this module contributes. The keys must start with
        "vs:" or "fs:", the values are str or dict with "content" and "order".
    uniforms : dict
        Uniform declarations, used by the default ``get_uniforms()``. Each value
        is a default value, or a dict with "value" and optional "type",
        "min", "max" and "private".
    get_uniforms : callable | None
        A function ``f(options, previous_uniforms) -> dict`` that replaces
        the default uniform computation.
    deprecations : list
        Dicts with "type" ("function", or a qualifier such as "attribute"),
        "old", "new" and "deprecated" (bool, False means removed).
    """

    def __init__(
        self,
        name,
        *,
        vs=None,
        fs=None,
        dependencies=(),
        defines=None,
        inject=None,
        uniforms=None,
        get_uniforms=None,
        deprecations=(),
    ):
        if not (isinstance(name, str) and name):
            raise TypeError("ShaderModule name must be a non-empty string.")
        for source in (vs, fs):
            if not (source is None or isinstance(source, str) or callable(source)):
                raise TypeError(
                    f"Shader module {name!r} source must be str or callable."
                )
        if get_uniforms is not None and not callable(get_uniforms):
            raise TypeError(f"Shader module {name!r} get_uniforms must be callable.")

        self._name = name
        self._sources = {"vs": vs, "fs": fs}
        self._dependencies = tuple(dependencies)
        self._defines = ReadOnlyDict(defines or {})
        self._injections = self._normalize_injections(inject or {})
        self._uniform_props = tuple(
            UniformProp(key, val) for key, val in (uniforms or {}).items()
        )
        self._get_uniforms_func = get_uniforms
        self._deprecations = self._parse_deprecations(deprecations)

    def __repr__(self):
        return f"<ShaderModule {self._name!r} at {hex(id(self))}>"

    def _normalize_injections(self, inject):
        result = {stage: {} for stage in STAGES}
        for key, value in inject.items():
            if not (isinstance(key, str) and key[:3] in ("vs:", "fs:")):
                raise InvalidInjectionKeyError(
                    key, f"injections of module {self._name!r} must target a stage"
                )
            injection = create_injection(key, value)
            result[injection.stage][key] = injection
        return ReadOnlyDict(
            {stage: ReadOnlyDict(result[stage]) for stage in STAGES}
        )

    def _parse_deprecations(self, deprecations):
        parsed = []
        for d in deprecations:
            old = re.escape(d["old"])
            if d["type"] == "function":
                regex = re.compile(rf"\b{old}\(")
            else:
                # A variable declaration with the given qualifier, e.g. "attribute vec3 old;"
                qualifier = re.escape(d["type"])
                regex = re.compile(rf"\b{qualifier}\s+\w+\s+{old}\s*;")
            parsed.append((regex, d["old"], d["new"], bool(d.get("deprecated", True))))
        return tuple(parsed)

    @property
    def name(self):
        """The name of this module."""
        return self._name

    @property
    def dependencies(self):
        """The modules that this module depends on (names or ShaderModule objects)."""
        return self._dependencies

    @property
    def defines(self):
        """The defines that this module contributes."""
        return self._defines

    @property
    def injections(self):
        """The injections of this module, as a dict ``stage -> key -> Injection``."""
        return self._injections

    @property
    def uniforms(self):
        """The names of the uniforms declared by this module."""
        return tuple(prop.name for prop in self._uniform_props)

    def get_defines(self):
        return self._defines

    def get_module_source(self, stage, glsl_version):
        """Get the source for the given stage ("vs" or "fs"), wrapped in
        a header that defines ``MODULE_<NAME>``.
        """
        if stage not in STAGES:
            raise ValueError(f"Invalid shader stage {stage!r}.")
        source = self._sources[stage]
        if source is None:
            source = ""
        elif callable(source):
            source = source(glsl_version)
        else:
            source = apply_templating(
                source,
                source_name=f"module '{self._name}' ({stage})",
                glsl_version=glsl_version,
                stage=stage,
                defines=self._defines,
            )
        if source and not source.endswith("\n"):
            source += "\n"
        define_name = re_non_identifier.sub("_", self._name.upper())
        return f"#define MODULE_{define_name}\n{source}// END MODULE_{self._name}\n\n"

    def get_uniforms(self, options=None, previous_uniforms=None):
        """Compute the uniforms of this module for the given options. The
        ``previous_uniforms`` are those produced by the modules earlier in the
        resolution order, e.g. this module's dependencies.
        """
        options = options or {}
        previous_uniforms = previous_uniforms or {}
        if self._get_uniforms_func is not None:
            return self._get_uniforms_func(options, previous_uniforms)
        uniforms = {}
        for prop in self._uniform_props:
            if prop.name in options and not prop.private:
                uniforms[prop.name] = prop.validate(options[prop.name], self._name)
            else:
                uniforms[prop.name] = prop.value
        return uniforms

    def check_deprecations(self, source, logger):
        """Check the given shader source for usage of deprecated or removed
        functionality of this module, and report these via the logger.
        """
        for regex, old, new, deprecated in self._deprecations:
            if regex.search(source):
                if deprecated:
                    logger.warning(
                        f"Shader module {self._name!r}: `{old}` is deprecated, use `{new}` instead."
                    )
                else:
                    logger.error(
                        f"Shader module {self._name!r}: `{old}` has been removed, use `{new}` instead."
                    )
