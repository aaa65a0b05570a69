"""관절 프레임워크: 강체 레지스트리와 관절."""

from .rigid_body import BodyRegistry, RigidBody
from .joints import DoubleInterval, PlanarCoupling, PlanarJoint, RenderProps

__all__ = [
    "BodyRegistry",
    "RigidBody",
    "DoubleInterval",
    "PlanarCoupling",
    "PlanarJoint",
    "RenderProps",
]
