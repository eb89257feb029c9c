"""Scene state for room composition.

This module provides the asset library, placed items, the central store
that owns them, and the document format used to save and export scenes.
"""

from .transform import Transform3D
from .models import LibraryAsset, SceneItem, TransformMode
from .document import DocumentError, InfoDocument, SceneDocument, parse_document
from .store import LoadTicket, SceneStore
from .frame import FrameState, ItemFrame, build_frame

__all__ = [
    "Transform3D",
    "LibraryAsset",
    "SceneItem",
    "TransformMode",
    "DocumentError",
    "InfoDocument",
    "SceneDocument",
    "parse_document",
    "LoadTicket",
    "SceneStore",
    "FrameState",
    "ItemFrame",
    "build_frame",
]
