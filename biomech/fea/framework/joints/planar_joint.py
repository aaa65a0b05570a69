"""평면 관절 (x, y, θ).

좌표 API에서 θ는 도(degree) 단위이고 구속 객체에는 라디안으로 전달된다.
범위를 설정하면 구속 객체의 한계가 바뀌고, 연결된 상태라면 현재 좌표를
새 범위로 자른 뒤 값이 바뀐 경우 물체 자세를 보정한다.
"""

import logging
import math
import numpy as np
from typing import Optional, Tuple, Union

from .interval import DoubleInterval
from .joint_base import BodyRef, JointBase
from .planar_coupling import PlanarCoupling
from .rendering import LineStyle, RenderFlags, RenderProps, Renderer
from ..rigid_body import BodyRegistry
from ....utils.properties import PropertyInfo
from ....utils.transform import RigidTransform, rotation_taking

logger = logging.getLogger(__name__)

RangeArg = Union[DoubleInterval, Tuple[float, float], float]

_X, _Y, _THETA = PlanarCoupling.X_IDX, PlanarCoupling.Y_IDX, PlanarCoupling.THETA_IDX


def _as_interval(lo: RangeArg, hi: Optional[float]) -> DoubleInterval:
    if isinstance(lo, DoubleInterval):
        return lo.copy()
    if hi is None:
        lo, hi = lo
    return DoubleInterval(lo, hi)


class PlanarJoint(JointBase):
    """3 자유도 평면 관절."""

    PROPERTIES = JointBase.PROPERTIES + (
        PropertyInfo("x", "x 병진", 0.0),
        PropertyInfo("x_range", "x 범위", DoubleInterval()),
        PropertyInfo("y", "y 병진", 0.0),
        PropertyInfo("y_range", "y 범위", DoubleInterval()),
        PropertyInfo("theta", "z축 회전각 (도)", 0.0, "1E %8.3f [-360,360]"),
        PropertyInfo("theta_range", "θ 범위 (도)", DoubleInterval()),
    )

    def __init__(
        self,
        registry: BodyRegistry,
        a: Optional[BodyRef] = None,
        tca: Optional[RigidTransform] = None,
        b: Optional[BodyRef] = None,
        tdb: Optional[RigidTransform] = None,
    ):
        """초기화.

        Args:
            registry: 물체 레지스트리
            a, tca: 물체 A와 C → A 변환 (a가 있으면 즉시 연결)
            b, tdb: 물체 B와 D → B 변환 (b가 None이면 접지, tdb = TDW)
        """
        super().__init__(registry, PlanarCoupling())
        self._x_range = DoubleInterval()
        self._y_range = DoubleInterval()
        self._theta_range = DoubleInterval()
        if a is not None:
            self.set_bodies(a, tca if tca is not None else RigidTransform.identity(), b, tdb)

    @classmethod
    def default_render_props(cls) -> RenderProps:
        """파란 원기둥 축."""
        return RenderProps(line_style=LineStyle.CYLINDER, line_color=(0.0, 0.0, 1.0))

    @classmethod
    def from_point_and_axis(
        cls,
        registry: BodyRegistry,
        a: BodyRef,
        b: Optional[BodyRef],
        pc: np.ndarray,
        axis: np.ndarray,
    ) -> "PlanarJoint":
        """월드 점 pc와 평면 법선 axis로 관절 생성 (D의 z축 = axis)."""
        tdw = RigidTransform(rotation_taking((0.0, 0.0, 1.0), axis), pc)
        joint = cls(registry)
        joint.set_bodies_from_world(a, b, tdw)
        return joint

    # ─────────── 좌표 ───────────

    def get_x(self) -> float:
        return self._coupling.get_x(self.get_current_tcd())

    def set_x(self, x: float):
        self._set_coordinate(_X, self._x_range.make_valid(x), "x")

    def get_y(self) -> float:
        return self._coupling.get_y(self.get_current_tcd())

    def set_y(self, y: float):
        self._set_coordinate(_Y, self._y_range.make_valid(y), "y")

    def get_theta(self) -> float:
        """θ [도]."""
        return math.degrees(self._coupling.get_theta(self.get_current_tcd()))

    def set_theta(self, theta: float):
        """θ [도] 설정 (범위로 자름, 감싸지 않음)."""
        theta = self._theta_range.make_valid(theta)
        self._set_coordinate(_THETA, math.radians(theta), "theta")

    def _set_coordinate(self, idx: int, value: float, name: str):
        tgd = self._coupling.set_coordinate(idx, value, self.get_current_tcd())
        if tgd is not None:
            self.adjust_poses(tgd)
        self.notify_host_of_property_change(name)

    x = property(get_x, set_x)
    y = property(get_y, set_y)
    theta = property(get_theta, set_theta)

    # ─────────── 범위 ───────────

    def get_x_range(self) -> DoubleInterval:
        return self._x_range.copy()

    def set_x_range(self, lo: RangeArg, hi: Optional[float] = None):
        self._set_range(_X, _as_interval(lo, hi))

    def get_y_range(self) -> DoubleInterval:
        return self._y_range.copy()

    def set_y_range(self, lo: RangeArg, hi: Optional[float] = None):
        self._set_range(_Y, _as_interval(lo, hi))

    def get_theta_range(self) -> DoubleInterval:
        """θ 범위 [도]."""
        return self._theta_range.copy()

    def set_theta_range(self, lo: RangeArg, hi: Optional[float] = None):
        """θ 범위 [도] 설정."""
        self._set_range(_THETA, _as_interval(lo, hi))

    x_range = property(get_x_range, set_x_range)
    y_range = property(get_y_range, set_y_range)
    theta_range = property(get_theta_range, set_theta_range)

    def set_min_x(self, value: float):
        self.set_x_range(value, self._x_range.upper)

    def set_max_x(self, value: float):
        self.set_x_range(self._x_range.lower, value)

    def set_min_y(self, value: float):
        self.set_y_range(value, self._y_range.upper)

    def set_max_y(self, value: float):
        self.set_y_range(self._y_range.lower, value)

    def set_min_theta(self, value: float):
        self.set_theta_range(value, self._theta_range.upper)

    def set_max_theta(self, value: float):
        self.set_theta_range(self._theta_range.lower, value)

    def _set_range(self, idx: int, rng: DoubleInterval):
        if idx == _THETA:
            self._coupling.set_coordinate_range(idx, math.radians(rng.lower), math.radians(rng.upper))
            self._theta_range = rng
            name, getter, setter = "theta_range", self.get_theta, self.set_theta
        elif idx == _X:
            self._coupling.set_coordinate_range(idx, rng.lower, rng.upper)
            self._x_range = rng
            name, getter, setter = "x_range", self.get_x, self.set_x
        else:
            self._coupling.set_coordinate_range(idx, rng.lower, rng.upper)
            self._y_range = rng
            name, getter, setter = "y_range", self.get_y, self.set_y
        self.notify_host_of_property_change(name)

        if self.is_connected_to_bodies():
            current = getter()
            clipped = rng.clip_to_range(current)
            if clipped != current:
                setter(clipped)

    # ─────────── 복제 / 렌더링 ───────────

    def copy(self) -> "PlanarJoint":
        """같은 축 길이, 렌더 속성, 범위를 가진 새 관절 (물체 연결은 복사하지 않음)."""
        new = type(self)(self._registry)
        new._axis_length = self._axis_length
        new._render_props = self._render_props.copy()
        new._set_range(_X, self._x_range.copy())
        new._set_range(_Y, self._y_range.copy())
        new._set_range(_THETA, self._theta_range.copy())
        return new

    def compute_axis_end_points(
        self, tdw: Optional[RigidTransform] = None
    ) -> Tuple[np.ndarray, np.ndarray]:
        """D 원점 ± (axis_length/2)·(D의 z축), 월드 좌표."""
        if tdw is None:
            tdw = self.get_current_tdw()
        half = 0.5 * self._axis_length * tdw.R[:, 2]
        return tdw.p - half, tdw.p + half

    def update_bounds(self, pmin: np.ndarray, pmax: np.ndarray):
        """장면 경계 (pmin, pmax)가 축 끝점을 포함하도록 제자리 갱신."""
        if not self.is_connected_to_bodies() or self._axis_length <= 0.0:
            return
        for p in self.compute_axis_end_points():
            np.minimum(pmin, p, out=pmin)
            np.maximum(pmax, p, out=pmax)

    def render(self, renderer: Renderer, flags: int = 0):
        """축을 양끝이 막힌 선으로 그린다 (상태 변경 없음)."""
        if (
            not self.is_connected_to_bodies()
            or self._axis_length <= 0.0
            or not self._render_props.visible
        ):
            return
        p0, p1 = self.compute_axis_end_points()
        renderer.draw_line(
            self._render_props,
            p0,
            p1,
            color=self._render_props.line_color,
            capped=True,
            selected=bool(flags & RenderFlags.SELECTED),
        )

    def __repr__(self) -> str:
        return (
            f"PlanarJoint(A={self._body_a}, B={self._body_b or '접지'}, "
            f"x={self._coupling.get_x():.4g}, y={self._coupling.get_y():.4g}, "
            f"θ={math.degrees(self._coupling.get_theta()):.4g}°)"
        )
