"""Kida environment setup and directive binding.

Creates a kida Environment from AppConfig and registers the site's
directives: ``blurb``, ``checked_if``, ``selected_if``, ``equal_selected``
and ``image_or_placeholder`` as filters; ``carousel``, ``first`` and
``window`` as globals taking a block argument. The environment is
created once during ``App._freeze()`` and shared by every request.

A block argument is either a callable (a kida ``def``, or any Python
callable) or the name of a partial template, rendered once per item::

    {{ carousel(features, "partials/feature_slide.html") }}
    {{ first(posts, 4, "partials/post_card.html") }}
    {{ window(posts, "4", "6", "partials/post_row.html") }}
"""

from collections.abc import Callable, Mapping
from typing import Any

from kida import ChoiceLoader, Environment, FileSystemLoader, PackageLoader
from kida.template import Markup

from masthead.config import AppConfig
from masthead.templating.directives import (
    BlockRenderer,
    carousel,
    checked_if,
    equal_selected,
    first_n,
    image_or_placeholder,
    selected_if,
    truncate_to_first_block,
    window,
)
from masthead.view_model import ViewModel


def _blurb(content: str | None) -> Markup:
    # Article bodies are stored as trusted HTML.
    return Markup(truncate_to_first_block(content))


DIRECTIVE_FILTERS: dict[str, Callable[..., Any]] = {
    "blurb": _blurb,
    "checked_if": checked_if,
    "equal_selected": equal_selected,
    "image_or_placeholder": image_or_placeholder,
    "selected_if": selected_if,
}


def block_renderer(env: Environment, block: Any) -> BlockRenderer:
    """Resolve a template block argument to a per-item renderer."""
    if callable(block):
        return lambda item: str(block(item))

    template = env.get_template(block)

    def render_partial(item: Any) -> str:
        if isinstance(item, Mapping):
            return template.render({**item, "item": item})
        return template.render({"item": item})

    return render_partial


def directive_globals(env: Environment) -> dict[str, Callable[..., Markup]]:
    """Block directives bound to *env* so partial names resolve through it."""

    def carousel_global(items: Any, block: Any) -> Markup:
        return Markup(carousel(items or (), block_renderer(env, block)))

    def first_global(items: Any, num: Any, block: Any) -> Markup:
        return Markup(first_n(items or (), num, block_renderer(env, block)))

    def window_global(items: Any, start: Any, num: Any, block: Any) -> Markup:
        return Markup(window(items or (), start, num, block_renderer(env, block)))

    return {
        "carousel": carousel_global,
        "first": first_global,
        "window": window_global,
    }


def create_environment(config: AppConfig, loader: Any = None) -> Environment:
    """Create a kida Environment from app configuration.

    Called once during ``App._freeze()``. Templates in
    ``config.template_dir`` shadow the packaged ones. Pass *loader* to
    replace template lookup entirely (tests use a ``DictLoader``).
    """
    if loader is None:
        loaders = []
        if config.template_dir is not None:
            loaders.append(FileSystemLoader(str(config.template_dir)))
        loaders.append(PackageLoader("masthead.templating", "templates"))
        loader = ChoiceLoader(loaders)

    env = Environment(
        loader=loader,
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )
    env.update_filters(DIRECTIVE_FILTERS)
    for name, value in directive_globals(env).items():
        env.add_global(name, value)
    return env


class KidaRenderer:
    """Rendering collaborator: page name + view model → HTML.

    Looks up ``{page}.html`` and renders it with the view model's
    flattened context.
    """

    __slots__ = ("env",)

    def __init__(self, env: Environment) -> None:
        self.env = env

    def __call__(self, page: str, view_model: ViewModel) -> str:
        template = self.env.get_template(f"{page}.html")
        return template.render(view_model.as_context())
