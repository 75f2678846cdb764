"""Variable collectors, resolvers and the ``{{{name}}}`` template engine.

A *variable* is a named output slot.  During a render, block transformers
append text fragments to the variable's *collector*; when every block is
done, each variable is turned into one string by its *resolver* and
substituted into the template.

Two variables always exist:

* ``content`` -- default target of block transformers.
* ``imports`` -- deduplicated import lines.  Unlike every other collector
  it survives :meth:`VariableRegistry.reset`, so imports accumulate over
  the lifetime of a renderer.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from notionmdx.errors import NotionMDXConfigurationError
from notionmdx.models import VariableResolver

if TYPE_CHECKING:
    from notionmdx.renderer.context import RendererContext

# ``{{{identifier}}}`` with identifier restricted to word characters.
PLACEHOLDER_RE = re.compile(r"{{{(\w+)}}}")

REQUIRED_VARIABLES: tuple[str, ...] = ("content", "imports")

IMPORTS = "imports"


async def default_resolver(name: str, context: RendererContext) -> str:
    """Join the variable's collected fragments with newlines, in append order."""
    return "\n".join(context.variable_data.get(name, ()))


def validate_template(template: str | None) -> str:
    """Return *template* if it contains every required placeholder.

    Raises
    ------
    NotionMDXConfigurationError
        If *template* is empty or lacks ``{{{content}}}`` or
        ``{{{imports}}}``.
    """
    if not template:
        raise NotionMDXConfigurationError(
            message="Template must be defined",
            context={"missing": "template"},
        )
    for name in REQUIRED_VARIABLES:
        if f"{{{{{{{name}}}}}}}" not in template:
            raise NotionMDXConfigurationError(
                message=f"Template must contain {name} variable",
                context={"missing": name},
            )
    return template


class VariableRegistry:
    """Collectors, resolvers and the active template of one renderer.

    Parameters
    ----------
    template:
        Initial template.  Validated immediately.
    """

    def __init__(self, template: str) -> None:
        self._collectors: dict[str, list[str]] = {}
        self._resolvers: dict[str, VariableResolver] = {}
        self._template = ""
        for name in REQUIRED_VARIABLES:
            self.add_variable(name)
        self.set_template(template)

    # -- configuration -----------------------------------------------------

    @property
    def template(self) -> str:
        return self._template

    @property
    def names(self) -> list[str]:
        """Registered variable names in registration order."""
        return list(self._collectors)

    @property
    def data(self) -> Mapping[str, list[str]]:
        """Live read-only view of every collector."""
        return MappingProxyType(self._collectors)

    def add_variable(self, name: str, resolver: VariableResolver | None = None) -> None:
        """Ensure a collector exists for *name*; register *resolver* if given."""
        self._collectors.setdefault(name, [])
        if resolver is not None:
            self._resolvers[name] = resolver

    def resolver(self, name: str) -> VariableResolver:
        return self._resolvers.get(name, default_resolver)

    def set_template(self, template: str) -> None:
        """Validate and install *template*, registering its placeholders."""
        self._template = validate_template(template)
        for name in PLACEHOLDER_RE.findall(template):
            self.add_variable(name)

    # -- collection --------------------------------------------------------

    def append(self, name: str, fragment: str) -> None:
        self._collectors.setdefault(name, []).append(fragment)

    def add_imports(self, *imports: str) -> None:
        """Append each import unless an identical string is already collected."""
        collector = self._collectors.setdefault(IMPORTS, [])
        for value in imports:
            if value not in collector:
                collector.append(value)

    def collected(self, name: str) -> list[str]:
        """Copy of the fragments collected for *name*."""
        return list(self._collectors.get(name, ()))

    def reset(self) -> None:
        """Empty every collector except ``imports``."""
        for name, collector in self._collectors.items():
            if name != IMPORTS:
                collector.clear()

    # -- rendering ---------------------------------------------------------

    async def render(self, context: RendererContext) -> str:
        """Resolve every variable and substitute it into the template.

        Variables are resolved one after another in registration order.
        Placeholders naming an unknown variable, or a variable resolving to
        an empty value, become ``""``.
        """
        resolved: dict[str, str] = {}
        for name in list(self._collectors):
            resolved[name] = await self.resolver(name)(name, context)

        return PLACEHOLDER_RE.sub(
            lambda match: resolved.get(match.group(1)) or "",
            self._template,
        )
