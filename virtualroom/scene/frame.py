"""Per-change snapshot handed to the rendering layer.

A FrameState is built from the store in one read, so the rig, bounds and
item transforms it carries always belong to the same store state.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .models import TransformMode
from .store import SceneStore
from ..lighting.bounds import RoomBounds
from ..lighting.rig import FurnitureLightingRig, RoomLightingRig
from ..mesh.materials import MaterialBrightnessAdjuster, SurfaceMaterial


@dataclass(frozen=True)
class ItemFrame:
    """Render instructions for one placed item.

    The room shell receives shadows but does not cast them; furniture
    does both.
    """

    id: str
    name: str
    url: str
    matrix: NDArray[np.float64]
    is_room: bool
    loaded: bool
    selected: bool

    @property
    def casts_shadow(self) -> bool:
        return not self.is_room

    @property
    def receives_shadow(self) -> bool:
        return True


@dataclass(frozen=True)
class FrameState:
    """Everything the renderer needs to draw the current scene."""

    environment: str
    transform_mode: TransformMode
    room_bounds: RoomBounds | None
    room_lighting: RoomLightingRig | None
    furniture_lighting: FurnitureLightingRig
    room_materials: tuple[tuple[str, SurfaceMaterial], ...]
    items: tuple[ItemFrame, ...]

    @property
    def selected(self) -> ItemFrame | None:
        for item in self.items:
            if item.selected:
                return item
        return None


def _copy_materials(
    adjuster: MaterialBrightnessAdjuster | None,
) -> tuple[tuple[str, SurfaceMaterial], ...]:
    """Snapshot (mesh name, material) pairs; shared materials stay shared."""
    if adjuster is None:
        return ()
    copies: dict[int, SurfaceMaterial] = {}
    pairs = []
    for mesh_name, material in adjuster.materials.items():
        if id(material) not in copies:
            copies[id(material)] = material.model_copy()
        pairs.append((mesh_name, copies[id(material)]))
    return tuple(pairs)


def build_frame(store: SceneStore) -> FrameState:
    """Snapshot the store for rendering.

    Rigs are resolved with their intensity multipliers applied.
    """
    with store.locked():
        return FrameState(
            environment=store.environment,
            transform_mode=store.transform_mode,
            room_bounds=store.room_bounds,
            room_lighting=store.room_lighting(),
            furniture_lighting=store.furniture_lighting(),
            room_materials=_copy_materials(store.room_materials),
            items=tuple(
                ItemFrame(
                    id=item.id,
                    name=item.name,
                    url=item.url,
                    matrix=item.transform.to_matrix(),
                    is_room=store.is_room_item(item),
                    loaded=store.is_loaded(item.id),
                    selected=item.id == store.selected_id,
                )
                for item in store.items
            ),
        )
