import re
import logging

from ..injection import Injection, create_injection


logger = logging.getLogger("pyshadertools")

DECLARATION_INJECT_MARKER = "__PYSHADERTOOLS_INJECT_DECLARATIONS__"

re_start_of_main = re.compile(r"void\s+main\s*\([^)]*\)\s*\{\n?")


def normalize_injections(inject):
    """Turn a dict of raw injections (key -> str or dict) into a list of
    Injection objects. Keys are validated here, so that this only happens once.
    """
    if not inject:
        return []
    if not isinstance(inject, dict):
        raise TypeError(f"Injections must be given as a dict, not {inject!r}")
    return [create_injection(key, value) for key, value in inject.items()]


def classify_injections(injections, modules, stage):
    """Bucket the injections that apply to the given stage.

    The application injections are recorded first, then the injections of
    each module, in resolution order. Returns three dicts (declarations,
    main, hooks), each mapping the injection key to a list of Injection
    objects.
    """
    decl_injections = {}
    main_injections = {}
    hook_injections = {}
    buckets = {
        "decl": decl_injections,
        "main": main_injections,
        "pattern": main_injections,
        "hook": hook_injections,
    }

    def add(injection):
        if injection.stage is not None and injection.stage != stage:
            return
        buckets[injection.kind].setdefault(injection.key, []).append(injection)

    for injection in injections:
        add(injection)
    for module in modules:
        for injection in module.injections[stage].values():
            add(injection)

    return decl_injections, main_injections, hook_injections


def sort_injections(injections):
    """Sort by order. Ties keep the order in which they were contributed."""
    return sorted(injections, key=lambda injection: injection.order)


def inject_shader(source, stage, injections):
    """Apply the given bucket of injections to the shader source. Targets
    that cannot be found in the source are ignored.
    """
    for key, bucket in injections.items():
        first = bucket[0]
        if first.stage is not None and first.stage != stage:
            continue

        fragment = "\n".join(i.content for i in sort_injections(bucket)) + "\n"
        new_source = _inject_fragment(source, first, fragment)
        if new_source is None:
            logger.debug(f"Injection target {key!r} not found in {stage} source.")
        else:
            source = new_source

    # Remove the marker if it hasn't already been replaced
    return source.replace(DECLARATION_INJECT_MARKER, "")


def find_end_of_main(source):
    """Get the index of the brace that closes ``main()``, or None if there
    is no (complete) main function.
    """
    match = re_start_of_main.search(source)
    if not match:
        return None
    depth = 1
    for index in range(source.index("{", match.start()) + 1, len(source)):
        c = source[index]
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth == 0:
                return index
    return None


def _inject_fragment(source, injection: Injection, fragment):
    if injection.kind == "decl":
        if DECLARATION_INJECT_MARKER not in source:
            return None
        return source.replace(DECLARATION_INJECT_MARKER, fragment, 1)

    elif injection.kind == "main" and injection.name == "main-start":
        match = re_start_of_main.search(source)
        if not match:
            return None
        return source[: match.end()] + fragment + source[match.end() :]

    elif injection.kind == "main" and injection.name == "main-end":
        index = find_end_of_main(source)
        if index is None:
            return None
        return source[:index] + fragment + source[index:]

    else:
        # Insert on a new line after the marker, leaving the marker in place
        marker = injection.name if injection.kind == "main" else injection.key
        index = source.find(marker)
        if index < 0:
            return None
        index += len(marker)
        return source[:index] + "\n" + fragment.rstrip("\n") + source[index:]
