"""Scene state store.

The SceneStore owns the asset library, placed items, selection, transform
mode and every environment/lighting knob. All mutations go through
``dispatch`` with a command object and are applied one at a time in issue
order; the convenience methods (``add_asset``, ``update_item`` ...) are thin
wrappers that build and dispatch the matching command.

Derived values are never stored alongside the knobs they depend on. Room
bounds are recomputed whenever the room asset finishes loading, and the
lighting rigs are resolved from the current preset, bounds and multiplier
every time they are read.

Asset loads are asynchronous from the store's point of view: ``begin_load``
hands out a ticket and ``complete_load`` applies the result only if the
ticket is still current, so a load that finishes after its item (or asset)
was removed is discarded.
"""

from __future__ import annotations

import itertools
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator, Union

import trimesh
from pydantic import ValidationError

from .document import DocumentError, InfoDocument, InfoItem, SceneDocument
from .models import LibraryAsset, SceneItem, TransformMode
from ..core.config import StudioConfig
from ..lighting.bounds import RoomBounds, calculate_room_bounds
from ..lighting.presets import (
    FurnitureLightingPreset,
    RoomLightingPreset,
    parse_furniture_preset,
    parse_room_preset,
)
from ..lighting.resolver import resolve_furniture_lighting, resolve_room_lighting
from ..lighting.rig import FurnitureLightingRig, RoomLightingRig
from ..mesh.loader import load_asset
from ..mesh.materials import MaterialBrightnessAdjuster

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AddAsset:
    asset: LibraryAsset


@dataclass(frozen=True)
class RemoveAsset:
    name: str


@dataclass(frozen=True)
class AddItem:
    asset_name: str


@dataclass(frozen=True)
class UpdateItem:
    item_id: str
    changes: dict[str, Any]


@dataclass(frozen=True)
class DeleteItem:
    item_id: str


@dataclass(frozen=True)
class Select:
    item_id: str | None


@dataclass(frozen=True)
class SetTransformMode:
    mode: TransformMode


@dataclass(frozen=True)
class SetEnvironment:
    environment: str


@dataclass(frozen=True)
class SetRoomLightingPreset:
    preset: RoomLightingPreset


@dataclass(frozen=True)
class SetFurnitureLightingPreset:
    preset: FurnitureLightingPreset


@dataclass(frozen=True)
class SetRoomLightIntensity:
    intensity: float


@dataclass(frozen=True)
class SetFurnitureLightIntensity:
    intensity: float


@dataclass(frozen=True)
class SetRoomMaterialBrightness:
    brightness: float


@dataclass(frozen=True)
class LoadDocument:
    document: SceneDocument


@dataclass(frozen=True)
class LoadTicket:
    """Handle for one in-flight asset load."""

    item_id: str
    url: str
    token: int


@dataclass(frozen=True)
class BeginLoad:
    item_id: str


@dataclass(frozen=True)
class CompleteLoad:
    ticket: LoadTicket
    geometry: trimesh.Scene | trimesh.Trimesh | None = field(compare=False)


Command = Union[
    AddAsset, RemoveAsset, AddItem, UpdateItem, DeleteItem, Select,
    SetTransformMode, SetEnvironment, SetRoomLightingPreset,
    SetFurnitureLightingPreset, SetRoomLightIntensity,
    SetFurnitureLightIntensity, SetRoomMaterialBrightness, LoadDocument,
    BeginLoad, CompleteLoad,
]

Listener = Callable[[Command, "SceneStore"], None]


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class SceneStore:
    """Single-writer owner of all mutable scene state."""

    def __init__(self, config: StudioConfig | None = None):
        self.config = config or StudioConfig.default()

        self._lock = threading.RLock()
        self._listeners: list[Listener] = []
        self._tokens = itertools.count(1)

        self._library: dict[str, LibraryAsset] = {}
        self._items: dict[str, SceneItem] = {}
        self._selected_id: str | None = None
        self._transform_mode = TransformMode.TRANSLATE

        self._apply_knobs(SceneDocument())

        # Derived from the loaded room asset
        self._room_item_id: str | None = None
        self._room_bounds: RoomBounds | None = None
        self._room_materials: MaterialBrightnessAdjuster | None = None

        self._pending: dict[str, int] = {}
        self._loaded: set[str] = set()

        self._handlers: dict[type, Callable[[Any], Any]] = {
            AddAsset: self._add_asset,
            RemoveAsset: self._remove_asset,
            AddItem: self._add_item,
            UpdateItem: self._update_item,
            DeleteItem: self._delete_item,
            Select: self._select,
            SetTransformMode: self._set_transform_mode,
            SetEnvironment: self._set_environment,
            SetRoomLightingPreset: self._set_room_lighting_preset,
            SetFurnitureLightingPreset: self._set_furniture_lighting_preset,
            SetRoomLightIntensity: self._set_room_light_intensity,
            SetFurnitureLightIntensity: self._set_furniture_light_intensity,
            SetRoomMaterialBrightness: self._set_room_material_brightness,
            LoadDocument: self._load_document,
            BeginLoad: self._begin_load,
            CompleteLoad: self._complete_load,
        }

    # -- dispatch ----------------------------------------------------------

    def dispatch(self, command: Command) -> Any:
        """Apply one command and notify listeners.

        Commands are serialized: a command is fully applied, and its
        listeners have run, before the next one starts.

        Returns:
            The handler's result (see the convenience methods)
        """
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unknown command: {type(command).__name__}")

        with self._lock:
            result = handler(command)
            logger.debug("Applied %s", type(command).__name__)
            for listener in list(self._listeners):
                listener(command, self)
        return result

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run after every command.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- read access -------------------------------------------------------

    @contextmanager
    def locked(self) -> Iterator[SceneStore]:
        """Hold off other writers while reading several values together."""
        with self._lock:
            yield self

    @property
    def library(self) -> list[LibraryAsset]:
        return list(self._library.values())

    @property
    def items(self) -> list[SceneItem]:
        return list(self._items.values())

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    @property
    def selected_item(self) -> SceneItem | None:
        if self._selected_id is None:
            return None
        return self._items.get(self._selected_id)

    @property
    def transform_mode(self) -> TransformMode:
        return self._transform_mode

    @property
    def environment(self) -> str:
        return self._environment

    @property
    def room_lighting_preset(self) -> RoomLightingPreset:
        return self._room_lighting_preset

    @property
    def furniture_lighting_preset(self) -> FurnitureLightingPreset:
        return self._furniture_lighting_preset

    @property
    def room_light_intensity(self) -> float:
        return self._room_light_intensity

    @property
    def furniture_light_intensity(self) -> float:
        return self._furniture_light_intensity

    @property
    def room_material_brightness(self) -> float:
        return self._room_material_brightness

    @property
    def room_bounds(self) -> RoomBounds | None:
        return self._room_bounds

    @property
    def room_materials(self) -> MaterialBrightnessAdjuster | None:
        return self._room_materials

    def has_asset(self, name: str) -> bool:
        return name in self._library

    def get_asset(self, name: str) -> LibraryAsset | None:
        return self._library.get(name)

    def get_item(self, item_id: str) -> SceneItem | None:
        return self._items.get(item_id)

    def is_loaded(self, item_id: str) -> bool:
        """True once the item's geometry load has completed."""
        return item_id in self._loaded

    def is_room_item(self, item: SceneItem) -> bool:
        return self.config.is_room_asset(item.name)

    def room_lighting(self, scaled: bool = True) -> RoomLightingRig | None:
        """Resolve the room rig from the current preset and bounds.

        Args:
            scaled: Apply the room intensity multiplier
        """
        rig = resolve_room_lighting(
            self._room_lighting_preset, self._room_bounds, self.config.rig
        )
        if rig is None or not scaled:
            return rig
        return rig.scaled(self._room_light_intensity)

    def furniture_lighting(self, scaled: bool = True) -> FurnitureLightingRig:
        """Resolve the furniture rig from the current preset.

        Args:
            scaled: Apply the furniture intensity multiplier
        """
        rig = resolve_furniture_lighting(self._furniture_lighting_preset)
        return rig.scaled(self._furniture_light_intensity) if scaled else rig

    # -- convenience mutators ---------------------------------------------

    def add_asset(self, name: str, url: str) -> bool:
        """Add an asset to the library.

        Returns:
            False (and no change) if an asset with that name already exists
        """
        return self.dispatch(AddAsset(LibraryAsset(name=name, url=url)))

    def remove_asset(self, name: str) -> bool:
        """Remove an asset and every item placed from it.

        Returns:
            True if the asset existed
        """
        return self.dispatch(RemoveAsset(name))

    def add_item(self, asset_name: str) -> SceneItem:
        """Place a new item from a library asset with the default transform.

        Raises:
            KeyError: If the asset is not in the library
        """
        return self.dispatch(AddItem(asset_name))

    def update_item(self, item_id: str, **changes: Any) -> SceneItem | None:
        """Merge transform fields into an item (last write wins).

        Returns:
            The updated item, or None if it does not exist
        """
        return self.dispatch(UpdateItem(item_id, changes))

    def delete_item(self, item_id: str) -> bool:
        return self.dispatch(DeleteItem(item_id))

    def select(self, item_id: str | None) -> bool:
        """Select an item, or clear the selection with None.

        Returns:
            False (and no change) if the item does not exist
        """
        return self.dispatch(Select(item_id))

    def set_transform_mode(self, mode: TransformMode | str) -> None:
        self.dispatch(SetTransformMode(TransformMode(mode)))

    def set_environment(self, environment: str) -> None:
        self.dispatch(SetEnvironment(environment))

    def set_room_lighting_preset(self, preset: RoomLightingPreset | str) -> None:
        self.dispatch(SetRoomLightingPreset(parse_room_preset(preset)))

    def set_furniture_lighting_preset(self, preset: FurnitureLightingPreset | str) -> None:
        self.dispatch(SetFurnitureLightingPreset(parse_furniture_preset(preset)))

    def set_room_light_intensity(self, intensity: float) -> None:
        self.dispatch(SetRoomLightIntensity(float(intensity)))

    def set_furniture_light_intensity(self, intensity: float) -> None:
        self.dispatch(SetFurnitureLightIntensity(float(intensity)))

    def set_room_material_brightness(self, brightness: float) -> None:
        self.dispatch(SetRoomMaterialBrightness(float(brightness)))

    def load_document(self, document: SceneDocument | dict[str, Any]) -> None:
        """Replace library, items and every knob from a document.

        Missing fields take the configured defaults; nothing from the
        previous state survives.

        Raises:
            DocumentError: If ``document`` is a dict with an invalid shape;
                the store is left untouched
        """
        if not isinstance(document, SceneDocument):
            try:
                document = SceneDocument.model_validate(document)
            except ValidationError as e:
                raise DocumentError(f"Scene data has an invalid shape: {e}") from e
        self.dispatch(LoadDocument(document))

    def begin_load(self, item_id: str) -> LoadTicket:
        """Start tracking a geometry load for an item.

        A newer ticket for the same item supersedes older ones.

        Raises:
            KeyError: If the item does not exist
        """
        return self.dispatch(BeginLoad(item_id))

    def complete_load(
        self,
        ticket: LoadTicket,
        geometry: trimesh.Scene | trimesh.Trimesh | None,
    ) -> bool:
        """Deliver a finished load.

        Returns:
            False if the ticket is stale and the result was discarded
        """
        return self.dispatch(CompleteLoad(ticket, geometry))

    def load_item_geometry(self, item_id: str, base_dir: Path | None = None) -> bool:
        """Load an item's asset synchronously and deliver it to the store."""
        ticket = self.begin_load(item_id)
        geometry = load_asset(ticket.url, base_dir)
        return self.complete_load(ticket, geometry)

    # -- projections -------------------------------------------------------

    def to_document(self) -> SceneDocument:
        """Project the full persisted document, payloads included."""
        with self._lock:
            return SceneDocument(
                library=self.library,
                items=self.items,
                **self._knob_fields(),
            )

    def to_info(self) -> InfoDocument:
        """Project the transform-only export without any payloads."""
        with self._lock:
            return InfoDocument(
                items=[
                    InfoItem(
                        id=item.id,
                        name=item.name,
                        position=item.position,
                        rotation=item.rotation,
                        scale=item.scale,
                    )
                    for item in self._items.values()
                ],
                **self._knob_fields(),
            )

    def _knob_fields(self) -> dict[str, Any]:
        return {
            "environment": self._environment,
            "room_lighting_preset": self._room_lighting_preset.value,
            "furniture_lighting_preset": self._furniture_lighting_preset.value,
            "room_light_intensity": self._room_light_intensity,
            "furniture_light_intensity": self._furniture_light_intensity,
            "room_material_brightness": self._room_material_brightness,
        }

    # -- handlers ----------------------------------------------------------

    def _add_asset(self, command: AddAsset) -> bool:
        asset = command.asset
        if asset.name in self._library:
            logger.warning("Asset %s is already in the library", asset.name)
            return False
        self._library[asset.name] = asset
        logger.info("Added %s to library", asset.name)
        return True

    def _remove_asset(self, command: RemoveAsset) -> bool:
        asset = self._library.pop(command.name, None)
        if asset is None:
            return False

        orphaned = [
            item_id for item_id, item in self._items.items()
            if item.name == asset.name and item.url == asset.url
        ]
        for item_id in orphaned:
            self._drop_item(item_id)

        logger.info("Removed %s from library (%d items)", asset.name, len(orphaned))
        return True

    def _add_item(self, command: AddItem) -> SceneItem:
        asset = self._library.get(command.asset_name)
        if asset is None:
            raise KeyError(f"Asset not in library: {command.asset_name}")
        item = SceneItem.from_asset(asset, self.config.placement)
        self._items[item.id] = item
        return item

    def _update_item(self, command: UpdateItem) -> SceneItem | None:
        item = self._items.get(command.item_id)
        if item is None:
            return None
        updated = item.with_transform(command.changes)
        self._items[item.id] = updated
        return updated

    def _delete_item(self, command: DeleteItem) -> bool:
        if command.item_id not in self._items:
            return False
        self._drop_item(command.item_id)
        return True

    def _drop_item(self, item_id: str) -> None:
        self._items.pop(item_id)
        self._pending.pop(item_id, None)
        self._loaded.discard(item_id)
        if self._selected_id == item_id:
            self._selected_id = None
        if self._room_item_id == item_id:
            self._clear_room()

    def _select(self, command: Select) -> bool:
        if command.item_id is not None and command.item_id not in self._items:
            logger.debug("Ignoring selection of unknown item %s", command.item_id)
            return False
        self._selected_id = command.item_id
        return True

    def _set_transform_mode(self, command: SetTransformMode) -> None:
        self._transform_mode = command.mode

    def _set_environment(self, command: SetEnvironment) -> None:
        self._environment = command.environment

    def _set_room_lighting_preset(self, command: SetRoomLightingPreset) -> None:
        self._room_lighting_preset = command.preset

    def _set_furniture_lighting_preset(self, command: SetFurnitureLightingPreset) -> None:
        self._furniture_lighting_preset = command.preset

    def _set_room_light_intensity(self, command: SetRoomLightIntensity) -> None:
        self._room_light_intensity = command.intensity

    def _set_furniture_light_intensity(self, command: SetFurnitureLightIntensity) -> None:
        self._furniture_light_intensity = command.intensity

    def _set_room_material_brightness(self, command: SetRoomMaterialBrightness) -> None:
        self._room_material_brightness = command.brightness
        if self._room_materials is not None:
            self._room_materials.apply(command.brightness)

    def _load_document(self, command: LoadDocument) -> None:
        doc = command.document

        self._library = {asset.name: asset for asset in doc.library or []}
        self._items = {item.id: item for item in doc.items or []}
        self._apply_knobs(doc)
        self._selected_id = None

        # Geometry must be reloaded for the new items
        self._pending.clear()
        self._loaded.clear()
        self._clear_room()

        logger.info(
            "Loaded scene: %d library assets, %d items",
            len(self._library), len(self._items),
        )

    def _apply_knobs(self, doc: SceneDocument) -> None:
        defaults = self.config.defaults

        def pick(value: Any, default: Any) -> Any:
            return default if value is None else value

        self._environment = pick(doc.environment, defaults.environment)
        self._room_lighting_preset = parse_room_preset(
            pick(doc.room_lighting_preset, defaults.room_lighting_preset)
        )
        self._furniture_lighting_preset = parse_furniture_preset(
            pick(doc.furniture_lighting_preset, defaults.furniture_lighting_preset)
        )
        self._room_light_intensity = pick(doc.room_light_intensity, defaults.room_light_intensity)
        self._furniture_light_intensity = pick(
            doc.furniture_light_intensity, defaults.furniture_light_intensity
        )
        self._room_material_brightness = pick(
            doc.room_material_brightness, defaults.room_material_brightness
        )

    def _begin_load(self, command: BeginLoad) -> LoadTicket:
        item = self._items.get(command.item_id)
        if item is None:
            raise KeyError(f"Item not in scene: {command.item_id}")
        ticket = LoadTicket(item_id=item.id, url=item.url, token=next(self._tokens))
        self._pending[item.id] = ticket.token
        return ticket

    def _complete_load(self, command: CompleteLoad) -> bool:
        ticket = command.ticket
        item = self._items.get(ticket.item_id)
        if (
            item is None
            or item.url != ticket.url
            or self._pending.get(ticket.item_id) != ticket.token
        ):
            logger.debug("Discarding stale load for item %s", ticket.item_id)
            return False

        del self._pending[ticket.item_id]
        self._loaded.add(ticket.item_id)

        if self.is_room_item(item):
            self._room_item_id = item.id
            self._room_bounds = calculate_room_bounds(command.geometry)
            self._room_materials = MaterialBrightnessAdjuster.from_geometry(command.geometry)
            self._room_materials.apply(self._room_material_brightness)
            logger.info("Room asset loaded: size=%s", self._room_bounds.size)
        return True

    def _clear_room(self) -> None:
        self._room_item_id = None
        self._room_bounds = None
        self._room_materials = None
