"""Base renderer protocol."""

from __future__ import annotations

from typing import Protocol

from pedigree_layout.layout.types import LayoutNode
from pedigree_layout.model.graph import PedigreeGraph


class Renderer(Protocol):
    """Protocol that all renderers must implement."""

    def render(self, graph: PedigreeGraph, nodes: dict[str, LayoutNode]) -> str:
        """Render a laid-out pedigree to an output string."""
        ...
