"""Library assets, placed scene items and the transform gizmo mode."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .transform import Transform3D, Vec3
from ..core.config import PlacementDefaults

TRANSFORM_FIELDS = frozenset({"position", "rotation", "scale"})


class TransformMode(str, Enum):
    """Which transform the gizmo edits on the selected item."""

    TRANSLATE = "translate"
    ROTATE = "rotate"
    SCALE = "scale"


class LibraryAsset(BaseModel):
    """An importable asset; ``name`` is unique within the library.

    ``url`` is either an external reference (file path) or an embedded
    base64 ``data:`` URL.
    """

    name: str = Field(description="Asset file name, unique key in the library")
    url: str = Field(description="File path or embedded data URL")

    model_config = {"frozen": True}


class SceneItem(BaseModel):
    """One placed, transformable instance of a library asset.

    The item refers back to its asset through ``url``; removing the asset
    removes every item with a matching ``url``.
    """

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for this item"
    )
    name: str = Field(description="Name of the asset this item was placed from")
    url: str = Field(description="Payload reference of the backing asset")
    position: Vec3 = Field(default=(0.0, 1.0, 0.0))
    rotation: Vec3 = Field(default=(0.0, 0.0, 0.0), description="XYZ euler radians")
    scale: Vec3 = Field(default=(1.0, 1.0, 1.0))

    model_config = {"frozen": True}

    @classmethod
    def from_asset(
        cls,
        asset: LibraryAsset,
        placement: PlacementDefaults | None = None,
    ) -> SceneItem:
        """Create a new item from an asset with the default transform."""
        placement = placement or PlacementDefaults()
        return cls(
            name=asset.name,
            url=asset.url,
            position=placement.position,
            rotation=placement.rotation,
            scale=placement.scale,
        )

    @property
    def transform(self) -> Transform3D:
        return Transform3D(position=self.position, rotation=self.rotation, scale=self.scale)

    def with_transform(self, changes: dict[str, Any]) -> SceneItem:
        """Return a copy with the given transform fields replaced.

        Args:
            changes: Any subset of ``position``, ``rotation`` and ``scale``

        Raises:
            ValueError: If ``changes`` names anything other than a transform field
        """
        unknown = set(changes) - TRANSFORM_FIELDS
        if unknown:
            raise ValueError(f"Unknown transform fields: {sorted(unknown)}")
        data = self.model_dump()
        data.update(changes)
        return SceneItem.model_validate(data)
