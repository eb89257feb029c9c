"""3D transformation utilities for placed scene items.

Provides Transform3D for representing position, rotation, and per-axis scale,
with conversion to 4x4 homogeneous transformation matrices for the renderer.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, Field
from scipy.spatial.transform import Rotation

Vec3 = tuple[float, float, float]


class Transform3D(BaseModel):
    """3D transformation: position + rotation + scale.

    Attributes:
        position: XYZ position in scene units
        rotation: XYZ Euler angles in radians (intrinsic, applied in XYZ order)
        scale: Per-axis scale factors
    """

    position: Vec3 = Field(
        default=(0.0, 0.0, 0.0),
        description="XYZ position"
    )
    rotation: Vec3 = Field(
        default=(0.0, 0.0, 0.0),
        description="XYZ rotation in radians (Euler angles)"
    )
    scale: Vec3 = Field(
        default=(1.0, 1.0, 1.0),
        description="Per-axis scale factors"
    )

    model_config = {"frozen": True}

    def to_matrix(self) -> NDArray[np.float64]:
        """Convert to 4x4 homogeneous transformation matrix.

        The transformation order is: Scale -> Rotate -> Translate
        This means the matrix is built as: T @ R @ S

        Returns:
            4x4 transformation matrix
        """
        s = np.diag([*self.scale, 1.0]).astype(np.float64)

        rot = Rotation.from_euler("XYZ", self.rotation)
        r = np.eye(4, dtype=np.float64)
        r[:3, :3] = rot.as_matrix()

        t = np.eye(4, dtype=np.float64)
        t[:3, 3] = self.position

        return t @ r @ s

    def rotation_degrees(self) -> Vec3:
        """Return rotation converted to degrees, for display."""
        return tuple(float(np.degrees(angle)) for angle in self.rotation)

    @classmethod
    def identity(cls) -> Transform3D:
        """Return identity transform (no transformation)."""
        return cls()

    def __repr__(self) -> str:
        return (
            f"Transform3D(pos={self.position}, "
            f"rot={self.rotation}, scale={self.scale})"
        )
