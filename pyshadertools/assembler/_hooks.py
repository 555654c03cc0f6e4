import re

from ..injection import STAGES
from ._injections import sort_injections


re_params = re.compile(r"\(.*", re.DOTALL)


class HookFunction:
    """The declaration of a hook function for one shader stage."""

    __slots__ = ["stage", "name", "signature", "header", "footer"]

    def __init__(self, stage, signature, header="", footer=""):
        self.stage = stage
        self.signature = signature
        self.name = re_params.sub("", signature).strip()
        self.header = header or ""
        self.footer = footer or ""

    @property
    def key(self):
        """The key that injections for this hook use, e.g. "vs:get_position"."""
        return f"{self.stage}:{self.name}"

    def __repr__(self):
        return f"<HookFunction {self.stage}:{self.signature}>"


def _parse_hook(hook, stage=None, header="", footer=""):
    if not isinstance(hook, str):
        raise ValueError(f"Hook function must be given as a string, not {hook!r}")
    hook = hook.strip()
    if stage is None:
        stage, _, signature = hook.partition(":")
    elif hook.startswith(stage + ":"):
        signature = hook[len(stage) + 1 :]
    else:
        signature = hook
    signature = signature.strip()
    if stage not in STAGES:
        raise ValueError(f"Hook function {hook!r} must start with 'vs:' or 'fs:'.")
    if not re_params.sub("", signature).strip():
        raise ValueError(f"Hook function {hook!r} has no name.")
    return HookFunction(stage, signature, header, footer)


def normalize_hook_functions(hook_functions):
    """Normalize a list of hook declarations to a dict ``stage -> key -> HookFunction``.

    Each declaration can be:

    * A string like "vs:get_position(vec3 position)".
    * A dict with "hook" (a string like above), and optionally "header" and "footer".
    * A dict with "vs" and/or "fs", that declares the hook for these stages.
      The values are signatures (without stage prefix) or dicts with "hook",
      "header" and "footer".
    """
    result = {stage: {} for stage in STAGES}

    for hook in hook_functions or ():
        if isinstance(hook, str):
            hooks = [_parse_hook(hook)]
        elif isinstance(hook, dict) and "hook" in hook:
            hooks = [_parse_hook(hook["hook"], None, hook.get("header"), hook.get("footer"))]
        elif isinstance(hook, dict) and set(hook).issubset(STAGES) and hook:
            hooks = []
            for stage, decl in hook.items():
                if isinstance(decl, dict):
                    hooks.append(
                        _parse_hook(
                            decl.get("hook"), stage, decl.get("header"), decl.get("footer")
                        )
                    )
                else:
                    hooks.append(_parse_hook(decl, stage))
        else:
            raise ValueError(f"Invalid hook function declaration: {hook!r}")

        for hook_function in hooks:
            result[hook_function.stage][hook_function.key] = hook_function

    return result


def _indent(text):
    lines = text.rstrip("\n").split("\n")
    return "".join(("  " + line if line.strip() else "") + "\n" for line in lines)


def get_hook_functions(hook_functions, hook_injections):
    """Generate the glsl for the given hook functions (of a single stage),
    filled with the matching injections. Hooks without injections produce
    a function with an empty body (apart from header and footer).
    """
    result = ""
    for key, hook_function in hook_functions.items():
        result += f"void {hook_function.signature} {{\n"
        if hook_function.header:
            result += _indent(hook_function.header)
        for injection in sort_injections(hook_injections.get(key, ())):
            result += _indent(injection.content)
        if hook_function.footer:
            result += _indent(hook_function.footer)
        result += "}\n"
    return result
