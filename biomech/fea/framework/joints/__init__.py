"""관절: 평면 관절 구속, 좌표 범위, 자세 보정, 렌더링 계약."""

from .interval import DoubleInterval
from .planar_coupling import PlanarCoupling
from .rendering import LineStyle, RenderFlags, RenderProps, Renderer
from .joint_base import JointBase
from .planar_joint import PlanarJoint

__all__ = [
    "DoubleInterval",
    "PlanarCoupling",
    "LineStyle",
    "RenderFlags",
    "RenderProps",
    "Renderer",
    "JointBase",
    "PlanarJoint",
]
