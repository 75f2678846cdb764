"""Variable resolvers for the MDX renderer.

* ``frontmatter`` -- YAML block built from the page properties, driven by
  the ``frontmatter`` option of the config stored in
  ``metadata["config"]``.
* ``imports`` -- the collected import lines followed by a blank line, or
  nothing when there are none.
"""

from __future__ import annotations

from typing import Any

from notionmdx.config import FrontmatterConfig, NotionMDXConfig
from notionmdx.models import VariableResolver
from notionmdx.renderer.context import RendererContext

from .helpers import extract_property_value, format_yaml_value


def _frontmatter_options(context: RendererContext) -> FrontmatterConfig | None:
    config = context.metadata.get("config")
    option: Any = config.frontmatter if isinstance(config, NotionMDXConfig) else config
    if isinstance(option, FrontmatterConfig):
        return option
    if option is True:
        return FrontmatterConfig()
    return None


def build_frontmatter_fields(
    properties: dict[str, Any], options: FrontmatterConfig
) -> dict[str, Any]:
    """Select, rename and default the page properties for the frontmatter.

    Property order is preserved; defaults for missing keys come last.
    """
    fields: dict[str, Any] = {}
    for name, prop in properties.items():
        if options.include and name not in options.include:
            continue
        if name in options.exclude:
            continue
        key = options.rename.get(name, name)
        fields[key] = extract_property_value(prop)

    for key, value in options.defaults.items():
        if fields.get(key) in (None, "", []):
            fields[key] = value
    return fields


async def resolve_frontmatter(name: str, context: RendererContext) -> str:
    options = _frontmatter_options(context)
    if options is None:
        return ""
    fields = build_frontmatter_fields(dict(context.page_properties), options)
    if not fields:
        return ""
    lines = [f"{key}: {format_yaml_value(value)}" for key, value in fields.items()]
    return "---\n" + "\n".join(lines) + "\n---\n\n"


async def resolve_imports(name: str, context: RendererContext) -> str:
    imports = context.variable_data.get(name, ())
    if not imports:
        return ""
    return "\n".join(imports) + "\n\n"


def create_default_variable_resolvers() -> dict[str, VariableResolver]:
    return {
        "frontmatter": resolve_frontmatter,
        "imports": resolve_imports,
    }
