"""
The exceptions raised while composing shaders. Each error also derives from
the builtin exception that best describes it, so callers that only know about
``ValueError`` and friends keep working.
"""


class ShaderAssemblyError(Exception):
    """Base class for errors that abort the assembly of a shader."""


class CyclicDependencyError(ShaderAssemblyError, ValueError):
    """The module dependency graph contains a cycle."""

    def __init__(self, cycle):
        self.cycle = tuple(cycle)
        super().__init__("Cyclic shader module dependency: " + " -> ".join(cycle))


class UnresolvedModuleError(ShaderAssemblyError, LookupError):
    """A module (or a dependency of a module) could not be found."""

    def __init__(self, name, dependent=None):
        self.name = name
        self.dependent = dependent
        if dependent:
            msg = f"Shader module {dependent!r} depends on unknown module {name!r}."
        else:
            msg = f"Unknown shader module {name!r}."
        super().__init__(msg)


class InvalidInjectionKeyError(ShaderAssemblyError, ValueError):
    """An injection key cannot be interpreted."""

    def __init__(self, key, reason=""):
        self.key = key
        msg = f"Invalid shader injection key {key!r}"
        super().__init__(msg + (f": {reason}" if reason else "."))


class TranspileError(ShaderAssemblyError, RuntimeError):
    """The shader source could not be transpiled to the requested version."""
