"""Social embed components.

Embeds render a placeholder element into the page and ask for the
provider's client script. Scripts are collected per page by a
``ScriptTracker`` so that a script is emitted once however many embeds use
it; layouts place ``{{ embed_scripts() }}`` before ``</body>``. Each script
runs the provider's build call once it has loaded.

Inside templates and ``.mdx`` bodies:

    {{ pinterest("https://www.pinterest.com/pin/99360735500167749/") }}
    {{ pinterest_script() }}
"""

from __future__ import annotations

from collections.abc import Callable

from markupsafe import Markup, escape

PINTEREST_SCRIPT = "//assets.pinterest.com/js/pinit.js"


class ScriptTracker:
    """Ordered, duplicate-free set of client scripts requested by one page."""

    def __init__(self) -> None:
        self._scripts: dict[str, str] = {}

    def request(self, src: str, on_load: str = "") -> None:
        if src not in self._scripts:
            self._scripts[src] = on_load

    @property
    def scripts(self) -> list[str]:
        return list(self._scripts)

    def render(self) -> Markup:
        """Render one async script tag per requested script."""
        tags = []
        for src, on_load in self._scripts.items():
            onload_attr = f' onload="{escape(on_load)}"' if on_load else ""
            tags.append(f'<script async defer src="{escape(src)}"{onload_attr}></script>')
        return Markup("\n".join(tags))


class EmbedProvider:
    """Base class of embed providers.

    Attributes:
        name: Template function name of the embed.
        script_src: Client script the embed needs.
        on_load: JavaScript run once the script has loaded.
    """

    name = ""
    script_src = ""
    on_load = ""

    def render(self, tracker: ScriptTracker, *args, **kwargs) -> Markup:
        raise NotImplementedError

    def require_script(self, tracker: ScriptTracker) -> Markup:
        tracker.request(self.script_src, self.on_load)
        return Markup("")


class PinterestEmbed(EmbedProvider):
    """Pinterest pin widget, built by ``pinit.js`` through ``window.doBuild``."""

    name = "pinterest"
    script_src = PINTEREST_SCRIPT
    on_load = "window.doBuild && window.doBuild()"

    def render(self, tracker: ScriptTracker, src: str) -> Markup:
        self.require_script(tracker)
        return Markup(
            '<a aria-label="Pinterest" data-pin-do="embedPin" data-pin-width="large"'
            ' data-pin-build="doBuild" href="{}"></a>'
        ).format(src)


class EmbedRegistry:
    """Registry of embed providers exposed to templates."""

    def __init__(self) -> None:
        self._providers: dict[str, EmbedProvider] = {}

    def register(self, provider: EmbedProvider) -> None:
        self._providers[provider.name] = provider

    def get(self, name: str) -> EmbedProvider | None:
        return self._providers.get(name)

    def template_functions(self, tracker: ScriptTracker) -> dict[str, Callable[..., Markup]]:
        """Bind every provider to ``tracker`` as template functions.

        Each provider ``name`` yields ``name(...)`` rendering the embed and
        ``name_script()`` requesting only its script; ``embed_scripts()``
        renders the collected script tags.
        """
        functions: dict[str, Callable[..., Markup]] = {}
        for name, provider in self._providers.items():
            functions[name] = _bind(provider.render, tracker)
            functions[f"{name}_script"] = _bind(provider.require_script, tracker)
        functions["embed_scripts"] = tracker.render
        return functions


def _bind(method, tracker: ScriptTracker):
    def bound(*args, **kwargs):
        return method(tracker, *args, **kwargs)

    return bound


def create_default_embed_registry() -> EmbedRegistry:
    registry = EmbedRegistry()
    registry.register(PinterestEmbed())
    return registry
