"""Axis-aligned bounds of a loaded room asset.

The bounds drive the room lighting rig: ceiling height, corner anchors and
falloff distances are all derived from them.
"""

from __future__ import annotations

import logging
from typing import Iterator, Sequence

import numpy as np
import trimesh
from numpy.typing import NDArray
from pydantic import BaseModel, model_validator

logger = logging.getLogger(__name__)


class RoomBounds(BaseModel):
    """Bounding volume of the room asset with its center point.

    Derived from geometry and never persisted. A room without renderable
    geometry yields the degenerate all-zero bounds.
    """

    min_x: float
    max_x: float
    min_y: float
    max_y: float
    min_z: float
    max_z: float
    center_x: float
    center_y: float
    center_z: float

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _ordered(self) -> RoomBounds:
        for axis in ("x", "y", "z"):
            low = getattr(self, f"min_{axis}")
            high = getattr(self, f"max_{axis}")
            center = getattr(self, f"center_{axis}")
            if not low <= center <= high:
                raise ValueError(
                    f"Expected min_{axis} <= center_{axis} <= max_{axis}, "
                    f"got {low}, {center}, {high}"
                )
        return self

    @classmethod
    def from_extents(
        cls,
        min_pt: Sequence[float],
        max_pt: Sequence[float],
    ) -> RoomBounds:
        """Create bounds from two opposite corners, computing the center.

        The corners may be given in either order per axis.
        """
        low = np.minimum(np.asarray(min_pt, dtype=np.float64), np.asarray(max_pt, dtype=np.float64))
        high = np.maximum(np.asarray(min_pt, dtype=np.float64), np.asarray(max_pt, dtype=np.float64))
        center = (low + high) / 2
        return cls(
            min_x=float(low[0]),
            max_x=float(high[0]),
            min_y=float(low[1]),
            max_y=float(high[1]),
            min_z=float(low[2]),
            max_z=float(high[2]),
            center_x=float(center[0]),
            center_y=float(center[1]),
            center_z=float(center[2]),
        )

    @classmethod
    def empty(cls) -> RoomBounds:
        """Return degenerate bounds with every coordinate at zero."""
        return cls.from_extents((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))

    @property
    def size(self) -> tuple[float, float, float]:
        """Return extents along X, Y and Z."""
        return (
            self.max_x - self.min_x,
            self.max_y - self.min_y,
            self.max_z - self.min_z,
        )

    @property
    def center(self) -> tuple[float, float, float]:
        return (self.center_x, self.center_y, self.center_z)

    @property
    def horizontal_span(self) -> float:
        """Return the larger of the X and Z extents."""
        return max(self.max_x - self.min_x, self.max_z - self.min_z)

    @property
    def is_degenerate(self) -> bool:
        """True when the bounds enclose no volume."""
        return any(extent <= 0 for extent in self.size)

    def contains_point(self, x: float, y: float, z: float) -> bool:
        """Check if a point is within the bounds."""
        return (
            self.min_x <= x <= self.max_x and
            self.min_y <= y <= self.max_y and
            self.min_z <= z <= self.max_z
        )


def _world_corners(
    geometry: trimesh.Scene | trimesh.Trimesh | None,
) -> Iterator[NDArray[np.float64]]:
    """Yield the world-space box corners of every renderable mesh."""
    if isinstance(geometry, trimesh.Trimesh):
        if len(geometry.vertices) > 0:
            yield trimesh.bounds.corners(geometry.bounds)
        return

    if not isinstance(geometry, trimesh.Scene):
        return

    for node_name in geometry.graph.nodes_geometry:
        transform, geom_name = geometry.graph[node_name]
        mesh = geometry.geometry.get(geom_name)
        # Point clouds and paths are not rendered as surfaces
        if not isinstance(mesh, trimesh.Trimesh) or len(mesh.vertices) == 0:
            continue
        corners = trimesh.bounds.corners(mesh.bounds)
        yield trimesh.transform_points(corners, transform)


def calculate_room_bounds(
    geometry: trimesh.Scene | trimesh.Trimesh | None,
) -> RoomBounds:
    """Compute the union bounding box over all meshes of a loaded asset.

    Each mesh's local box is carried through its scene-graph transform and the
    union is taken over the transformed corners.

    Args:
        geometry: Loaded asset (scene or single mesh)

    Returns:
        RoomBounds of the asset, or degenerate bounds if it has no meshes
    """
    corners = list(_world_corners(geometry))
    if not corners:
        logger.warning("Room asset has no renderable geometry; using empty bounds")
        return RoomBounds.empty()

    stacked = np.vstack(corners)
    bounds = RoomBounds.from_extents(stacked.min(axis=0), stacked.max(axis=0))
    logger.debug("Room bounds: size=%s center=%s", bounds.size, bounds.center)
    return bounds
