"""Renderers that turn decoded packets into inspectable text."""

from .base import Renderer
from .json_renderer import JSONRenderer, packet_to_dict
from .summary_renderer import SummaryRenderer

__all__ = [
    "Renderer",
    "JSONRenderer",
    "SummaryRenderer",
    "packet_to_dict",
    "register_renderer",
    "get_renderer",
    "list_renderers",
]


# Renderer registry
_RENDERERS: dict[str, type[Renderer]] = {}


def register_renderer(name: str, renderer_class: type[Renderer]) -> None:
    """Register a renderer implementation."""
    _RENDERERS[name] = renderer_class


def get_renderer(name: str) -> Renderer:
    """Get a renderer instance by name."""
    if name not in _RENDERERS:
        raise ValueError(f"Unknown renderer: {name}")
    return _RENDERERS[name]()


def list_renderers() -> list[str]:
    """List all registered renderer names."""
    return list(_RENDERERS.keys())


# Register default renderers
register_renderer("json", JSONRenderer)
register_renderer("summary", SummaryRenderer)
