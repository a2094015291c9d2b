"""World-space mapping and render output module."""

from .world_mapper import to_world, map_positions
from .publisher import RenderPublisher, RenderSnapshot, RenderJoint

__all__ = [
    "to_world",
    "map_positions",
    "RenderPublisher",
    "RenderSnapshot",
    "RenderJoint",
]
