"""Grid/tree definitions loaded through EXTDATA_DEFINITIONS-style module import."""

from extdata.registry import get_render_registry

registry = get_render_registry()
registry.grid("item", lambda g: g.column("name"))
registry.tree("item", lambda t: t.node("item", text="name"))
