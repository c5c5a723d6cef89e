"""Base renderer interface."""

from abc import ABC, abstractmethod

from ..frames import Packet


class Renderer(ABC):
    """Base interface for packet renderers."""

    @abstractmethod
    def render(self, packet: Packet) -> str:
        """Render a decoded packet as text."""
        pass
