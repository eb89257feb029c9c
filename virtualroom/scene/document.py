"""Scene document codec.

Two JSON shapes are produced from a store:

* the full document, which embeds the library (with asset payloads) and
  every item including its ``url``; and
* the info export, which reduces items to ``id, name, position, rotation,
  scale`` and never carries a payload.

Field names use the camelCase keys of the persisted format. Any top-level
field may be missing from a loaded document; the store substitutes its
configured defaults for missing fields.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, model_validator

from .models import LibraryAsset, SceneItem
from .transform import Vec3


class DocumentError(ValueError):
    """A scene document could not be parsed or has the wrong shape."""


class _DocumentBase(BaseModel):
    environment: str | None = None
    room_lighting_preset: str | None = Field(default=None, alias="roomLightingPreset")
    furniture_lighting_preset: str | None = Field(default=None, alias="furnitureLightingPreset")
    room_light_intensity: float | None = Field(default=None, alias="roomLightIntensity")
    furniture_light_intensity: float | None = Field(default=None, alias="furnitureLightIntensity")
    room_material_brightness: float | None = Field(default=None, alias="roomMaterialBrightness")

    model_config = {"populate_by_name": True}

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)

    def save(self, path: str | Path) -> None:
        """Write the document as JSON.

        Args:
            path: Output file path
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            f.write(self.to_json())


class SceneDocument(_DocumentBase):
    """Full persisted scene: library, items and every lighting knob."""

    library: list[LibraryAsset] | None = None
    items: list[SceneItem] | None = None

    @model_validator(mode="after")
    def _unique_library_names(self) -> SceneDocument:
        names = [asset.name for asset in self.library or []]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate library asset names: {duplicates}")
        return self

    @model_validator(mode="after")
    def _unique_item_ids(self) -> SceneDocument:
        ids = [item.id for item in self.items or []]
        duplicates = sorted({item_id for item_id in ids if ids.count(item_id) > 1})
        if duplicates:
            raise ValueError(f"Duplicate item ids: {duplicates}")
        return self

    @classmethod
    def load(cls, path: str | Path) -> SceneDocument:
        """Load a document from a JSON file.

        Raises:
            DocumentError: If the file is not a valid scene document
        """
        path = Path(path)
        with open(path, "rb") as f:
            return parse_document(f.read())


class InfoItem(BaseModel):
    """Transform-only view of a scene item."""

    id: str
    name: str
    position: Vec3
    rotation: Vec3
    scale: Vec3


class InfoDocument(_DocumentBase):
    """Lightweight export of item transforms and lighting, without payloads."""

    items: list[InfoItem] = Field(default_factory=list)


def parse_document(data: str | bytes) -> SceneDocument:
    """Parse a full scene document.

    The whole input is validated before anything is returned, so a caller
    that only applies the result on success never sees a partial load.

    Args:
        data: JSON text

    Returns:
        The parsed document; missing fields are None

    Raises:
        DocumentError: On invalid JSON or a shape that is not a scene document
    """
    try:
        raw = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DocumentError(f"Scene file is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise DocumentError(
            f"Scene file must contain a JSON object, got {type(raw).__name__}"
        )

    try:
        return SceneDocument.model_validate(raw)
    except ValidationError as e:
        raise DocumentError(f"Scene file has an invalid shape: {e}") from e
