from ..errors import UnresolvedModuleError
from ._base import ShaderModule


class ShaderModuleRegistry:
    """Storage for shader modules that can be referenced by name.

    Modules are registered once (typically at import time of the package
    that provides them) and never replaced. Once the registry is locked,
    no more modules can be added, so that assembling shaders always sees
    the same set of modules.
    """

    def __init__(self, modules=()):
        self._store = {}
        self._locked = False
        for module in modules:
            self.register(module)

    def register(self, module):
        """Register a shader module under its name. Returns the module, so
        this can be used as ``foo = registry.register(ShaderModule(...))``.
        """
        if not isinstance(module, ShaderModule):
            raise TypeError(f"Expected ShaderModule instance, got {module!r}.")
        if self._locked:
            raise RuntimeError("Cannot register shader modules in a locked registry.")
        if module.name in self._store:
            raise ValueError(
                f"A shader module named {module.name!r} is already registered."
            )
        self._store[module.name] = module
        return module

    def lock(self):
        """Prevent further registrations."""
        self._locked = True

    @property
    def locked(self):
        """Whether this registry is locked."""
        return self._locked

    def get(self, name):
        """Get the module with the given name. Raises UnresolvedModuleError
        if no such module is registered.
        """
        try:
            return self._store[name]
        except KeyError:
            raise UnresolvedModuleError(name) from None

    def __contains__(self, name):
        return name in self._store

    def __len__(self):
        return len(self._store)

    def __iter__(self):
        return iter(self._store.values())
