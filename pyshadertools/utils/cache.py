import weakref


class ShaderCache:
    """A cache for assembled shaders.

    The cache does not keep the results alive: an entry disappears as soon
    as nobody else holds a reference to it.
    """

    def __init__(self, name="shaders"):
        assert isinstance(name, str)
        self.name = name
        self._objects = weakref.WeakValueDictionary()
        self._enabled = True
        self.hits = 0
        self.misses = 0

    def get_stats(self):
        """Get the number of (alive) objects in the cache, and the hit and miss counts."""
        return len(list(self._objects.values())), self.hits, self.misses

    def enable(self):
        """Enable this cache."""
        self._enabled = True

    def disable(self):
        """Disable this cache."""
        self._enabled = False

    def get(self, key):
        """Get the cached object or None."""
        if self._enabled:
            try:
                ob = self._objects[key]
            except KeyError:
                ob = None
                self.misses += 1
            else:
                self.hits += 1
        else:
            ob = None
        return ob

    def set(self, key, ob):
        """Store the given object under the given key.
        Note that the cache does not have a (strong) ref to the object.
        """
        if self._enabled:
            self._objects[key] = ob
