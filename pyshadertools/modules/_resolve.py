from ..errors import CyclicDependencyError, UnresolvedModuleError
from ._base import ShaderModule


def resolve_modules(modules, registry=None):
    """Get a flat tuple of modules, in which each module comes after its
    dependencies, and each module occurs only once.

    Modules can be given as ShaderModule objects, or as names that are looked
    up in the given registry. The same goes for the dependencies of modules.
    Modules are identified by their name.
    """
    resolved = {}  # name -> module, in resolution order
    in_progress = []  # names on the current visitation stack

    for module in modules:
        _visit(_lookup(module, registry, None), registry, resolved, in_progress)

    return tuple(resolved.values())


def _lookup(module, registry, dependent):
    if isinstance(module, ShaderModule):
        return module
    elif isinstance(module, str):
        if registry is None or module not in registry:
            raise UnresolvedModuleError(module, dependent)
        return registry.get(module)
    else:
        raise TypeError(f"Expected ShaderModule or module name, got {module!r}.")


def _visit(module, registry, resolved, in_progress):
    name = module.name
    if name in resolved:
        return
    if name in in_progress:
        cycle = in_progress[in_progress.index(name) :] + [name]
        raise CyclicDependencyError(cycle)

    in_progress.append(name)
    for dep in module.dependencies:
        _visit(_lookup(dep, registry, name), registry, resolved, in_progress)
    in_progress.pop()

    resolved[name] = module
