"""
Glsl sources of shader modules are jinja2 templates. Blocks use ``{$ $}``,
variables use ``{{ }}``, and lines starting with ``$$`` are statements, so
that the braces of glsl itself do not get in the way. Snippets are included
by a dotted name, e.g. ``{$ include 'pyshadertools.constants.glsl' $}``,
where the first part selects a registered loader.
"""

import os

import jinja2


glsl_loaders = jinja2.PrefixLoader({}, delimiter=".")

jinja_env = jinja2.Environment(
    block_start_string="{$",
    block_end_string="$}",
    variable_start_string="{{",
    variable_end_string="}}",
    line_statement_prefix="$$",
    undefined=jinja2.StrictUndefined,
    loader=glsl_loaders,
)


def register_glsl_loader(context, loader):
    """Make glsl snippets available for inclusion in shader module sources.

    After ``register_glsl_loader("mylib", {"noise.glsl": ...})``, a module can
    use ``{$ include 'mylib.noise.glsl' $}``.

    Parameters
    ----------
    context : str
        The first part of the include name. Cannot contain dots.
    loader : dict | os.PathLike | callable | jinja2.BaseLoader
        A dict mapping names to glsl, a directory containing glsl files, a
        function that gets the name and returns the glsl (or None), or any
        jinja2 loader.
    """
    if not isinstance(context, str) or not context or "." in context:
        raise TypeError(f"Glsl loader context must be a str without dots, not {context!r}")
    if context in glsl_loaders.mapping:
        raise RuntimeError(f"A glsl loader is already registered for '{context}'.")

    if isinstance(loader, dict):
        loader = jinja2.DictLoader(loader)
    elif isinstance(loader, os.PathLike):
        loader = jinja2.FileSystemLoader(os.fspath(loader))
    elif callable(loader) and not isinstance(loader, jinja2.BaseLoader):
        loader = jinja2.FunctionLoader(loader)
    elif not isinstance(loader, jinja2.BaseLoader):
        raise TypeError(f"Invalid glsl loader for '{context}': {loader!r}")
    glsl_loaders.mapping[context] = loader


register_glsl_loader("pyshadertools", jinja2.PackageLoader("pyshadertools.glsl", "."))


def _render(get_template, what, kwargs):
    where = f" {what}" if what else ""
    try:
        return get_template().render(**kwargs)
    except jinja2.UndefinedError as err:
        raise ValueError(f"Cannot compose shader{where}: {err.args[0]}") from None
    except jinja2.TemplateNotFound as err:
        raise ValueError(
            f"Cannot compose shader{where}: glsl snippet '{err.name}' not found."
        ) from None
    except jinja2.TemplateSyntaxError as err:
        raise ValueError(
            f"Cannot compose shader{where}: {err.message} (line {err.lineno})"
        ) from None


def apply_templating(code, *, source_name=None, **kwargs):
    """Render glsl code as a template. The ``source_name`` is used in error messages."""
    return _render(lambda: jinja_env.from_string(code), source_name, kwargs)


def render_template(name, **kwargs):
    """Render one of the packaged glsl templates, e.g. "prologue.glsl"."""
    return _render(lambda: jinja_env.get_template("pyshadertools." + name), name, kwargs)
