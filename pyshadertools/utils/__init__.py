"""
Utility functions for pyshadertools.

.. currentmodule:: pyshadertools.utils

.. autosummary::
    :toctree: utils/

    ReadOnlyDict
    hash_from_value
    cache.ShaderCache

"""

import os
import json
import logging

import numpy as np


logger = logging.getLogger("pyshadertools")


def _set_log_level():
    # Set default level
    logger.setLevel(logging.WARN)
    # Set user-specified level
    level = os.getenv("PYSHADERTOOLS_LOG_LEVEL", "")
    if level:
        try:
            if level.isnumeric():
                logger.setLevel(int(level))
            else:
                logger.setLevel(level.upper())
        except Exception:
            logger.warning(f"Invalid pyshadertools log level: {level}")


_set_log_level()


def is_finite_number(value):
    """Get whether the value is a real finite number. Bools do not count."""
    if isinstance(value, (bool, np.bool_)):
        return False
    if isinstance(value, (int, np.integer)):
        return True
    if not isinstance(value, (float, np.floating)):
        return False
    return bool(np.isfinite(value))


class ReadOnlyDict(dict):
    """A read-only dict, for storing structured data that can be hashed."""

    __slots__ = ["_hash"]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Calculate hash in a way that requires any value to also be hashable
        parts = []
        for k in sorted(self.keys()):
            v = self[k]
            parts.append(str(hash(k)))
            parts.append(str(hash(v)))
        self._hash = hash(" ".join(parts))

    def __setitem__(self, *args, **kwargs):
        raise TypeError("Cannot modify ReadOnlyDict")

    def __delitem__(self, *args, **kwargs):
        raise TypeError("Cannot modify ReadOnlyDict")

    def clear(self, *args, **kwargs):
        raise TypeError("Cannot modify ReadOnlyDict")

    def pop(self, *args, **kwargs):
        raise TypeError("Cannot modify ReadOnlyDict")

    def popitem(self, *args, **kwargs):
        raise TypeError("Cannot modify ReadOnlyDict")

    def setdefault(self, *args, **kwargs):
        raise TypeError("Cannot modify ReadOnlyDict")

    def update(self, *args, **kwargs):
        raise TypeError("Cannot modify ReadOnlyDict")

    def __hash__(self):
        return self._hash


class JsonEncoderWithShaderSupport(json.JSONEncoder):
    def default(self, ob):
        if isinstance(ob, np.generic):
            return ob.item()
        elif isinstance(ob, np.ndarray):
            return ob.tolist()
        elif hasattr(ob, "get_module_source"):
            return "ShaderModule:" + ob.name + "@" + hex(id(ob))
        elif callable(ob) or isinstance(ob, logging.Logger):
            return ob.__class__.__name__ + "@" + hex(id(ob))
        return super().default(ob)


jsonencoder = JsonEncoderWithShaderSupport(sort_keys=True)


def hash_from_value(value):
    """Simple way to create a hash from a (possibly composite) object.
    Assumes JSON encodable objects, numpy values, shader modules and callables.
    The latter two are identified by their id.
    """
    # Encode the value to string using json. The JSON encoder is so fast that
    # its hard to come up with something that can serialze to str faster.
    s = jsonencoder.encode(value)

    # Return hash (an int). For debugging purposes it can be helpul to return s instead.
    return hash(s)
