"""Centralized configuration for pedigree-layout."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace

_POSITIVE_FIELDS = (
    "node_width",
    "node_height",
    "horizontal_spacing",
    "vertical_spacing",
    "sibling_spacing",
    "spouse_spacing",
    "safe_offset_step",
    "max_collision_passes",
    "max_relaxation_passes",
)


@dataclass
class LayoutOptions:
    """Geometry and iteration limits for the layout engine."""

    node_width: float = 50
    node_height: float = 50
    horizontal_spacing: float = 30
    vertical_spacing: float = 100
    sibling_spacing: float = 40
    spouse_spacing: float = 60
    top_margin: float = 50
    safe_offset_step: float = 5
    max_collision_passes: int = 10
    max_relaxation_passes: int = 1000

    def __post_init__(self) -> None:
        for name in _POSITIVE_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ValueError(f"Layout option '{name}' must be a positive number, got {value!r}")
        if self.top_margin < 0:
            raise ValueError(f"Layout option 'top_margin' must not be negative, got {self.top_margin!r}")

    @property
    def row_height(self) -> float:
        return self.node_height + self.vertical_spacing

    def merged(self, **changes: float) -> LayoutOptions:
        """Return a copy with the given options replaced.

        Raises:
            ValueError: If an option name is unknown or a value is invalid.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValueError(f"Unknown layout option(s): {', '.join(unknown)}")
        return replace(self, **changes)

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass
class RenderConfig:
    """Configuration for the text rendering pipeline."""

    unicode: bool = True
    show_generations: bool = True
    mark_affected: bool = True
