"""
Injections are snippets of code that are inserted into a shader at a specific
place. The key of an injection determines where it goes:

* ``"vs:#decl"`` / ``"fs:#decl"``: global declarations, inserted before the
  hook functions.
* ``"vs:#main-start"``, ``"fs:#main-end"``, ``"fs:#some-marker"``: code that is
  spliced into the body of the shader.
* ``"vs:some_hook"`` (no hash): statements that are added to a hook function.
* Any other string: a pattern injection. The code is inserted after the first
  occurrence of the key in either shader stage.
"""

import re

from .errors import InvalidInjectionKeyError


STAGES = ("vs", "fs")

re_injection_key = re.compile(r"^(v|f)s:(#)?([\w-]+)$")


class Injection:
    """A single contribution of code to an injection target."""

    __slots__ = ["kind", "stage", "name", "key", "content", "order"]

    def __init__(self, kind, stage, name, key, content, order=0):
        self.kind = kind  # "hook", "decl", "main" or "pattern"
        self.stage = stage  # "vs", "fs", or None for pattern injections
        self.name = name
        self.key = key
        self.content = content
        self.order = order

    def __repr__(self):
        return f"<Injection {self.key!r} order={self.order}>"

    def __eq__(self, other):
        if not isinstance(other, Injection):
            return NotImplemented
        return all(getattr(self, k) == getattr(other, k) for k in self.__slots__)

    def __hash__(self):
        return hash(tuple(getattr(self, k) for k in self.__slots__))


def parse_injection_key(key):
    """Parse an injection key into a (kind, stage, name) tuple."""
    if not isinstance(key, str) or not key.strip():
        raise InvalidInjectionKeyError(key, "must be a non-empty string")
    match = re_injection_key.match(key)
    if match:
        stage = match.group(1) + "s"
        name = match.group(3)
        if not match.group(2):
            return "hook", stage, name
        elif name == "decl":
            return "decl", stage, name
        else:
            return "main", stage, name
    elif key.startswith(("vs:", "fs:")):
        raise InvalidInjectionKeyError(
            key, "stage-prefixed keys must look like 'vs:name' or 'fs:#name'"
        )
    else:
        return "pattern", None, key


def create_injection(key, value):
    """Create an Injection from a key and a value that is either a string,
    or a dict with "content" and optionally "order".
    """
    kind, stage, name = parse_injection_key(key)
    if isinstance(value, str):
        content, order = value, 0
    elif isinstance(value, dict) and isinstance(value.get("content", None), str):
        content, order = value["content"], value.get("order", 0)
    else:
        raise TypeError(
            f"Injection for {key!r} must be a str or a dict with 'content', not {value!r}"
        )
    if isinstance(order, bool) or not isinstance(order, (int, float)):
        raise TypeError(f"Injection order for {key!r} must be a number.")
    return Injection(kind, stage, name, key, content, order)
