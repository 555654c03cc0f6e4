import numbers

import numpy as np

from ..utils import is_finite_number


def merge_defines(modules, defines=None):
    """Combine the defines of the given (resolved) modules with the
    application defines. Later modules override earlier ones, and the
    application defines override all module defines.
    """
    all_defines = {}
    for module in modules:
        all_defines.update(module.get_defines())
    all_defines.update(defines or {})
    return all_defines


def should_emit_define(value):
    """Whether a define with the given value results in a ``#define``.

    Numbers are emitted when they are finite (so zero is emitted, nan is not).
    Other values are emitted when they are truthy, so False, "" and None can
    be used to suppress a define.
    """
    if isinstance(value, numbers.Number) and not isinstance(value, (bool, np.bool_)):
        return is_finite_number(value)
    return bool(value)


def format_define_value(value):
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    elif isinstance(value, np.generic):
        return str(value.item())
    return str(value)


def get_application_defines(defines):
    """Generate the glsl text for the given (merged) defines."""
    if not defines:
        return "\n"
    lines = ["", "// APPLICATION DEFINES"]
    for name, value in defines.items():
        if should_emit_define(value):
            lines.append(f"#define {name.upper()} {format_define_value(value)}")
    return "\n".join(lines) + "\n"
