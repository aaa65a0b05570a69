"""관절 공통 기반: 물체 연결, 프레임 변환, 자세 보정, 호스트 속성.

프레임 규약:
- C: 물체 A에 부착, TCA (C → A)
- D: 물체 B에 부착, TDB (D → B). B가 없으면(접지) TDB는 곧 TDW
- TCW = TAW·TCA, TDW = TBW·TDB, TCD = TDW⁻¹·TCW

관절은 물체 객체가 아닌 이름만 저장하고 BodyRegistry에서 조회한다.
"""

import logging
import numpy as np
from typing import Optional, Union

from .rendering import RenderProps
from ..rigid_body import BodyRegistry, RigidBody
from ...fem.validation import FEAValidationError, validate_nonnegative_vector
from ....config import get_config
from ....utils.properties import PropertyHost, PropertyInfo
from ....utils.transform import RigidTransform

logger = logging.getLogger(__name__)

BodyRef = Union[str, RigidBody]


class JointBase(PropertyHost):
    """두 물체(또는 물체와 월드)를 잇는 관절."""

    PROPERTIES = (
        PropertyInfo("axis_length", "렌더링 축 길이", 0.0, "NW %8.3f"),
        PropertyInfo("render_props", "렌더 속성", None),
        PropertyInfo("compliance", "구속 방향 컴플라이언스 (6)", (0.0,) * 6),
        PropertyInfo("damping", "구속 방향 감쇠 (6)", (0.0,) * 6),
    )

    def __init__(self, registry: BodyRegistry, coupling):
        """초기화.

        Args:
            registry: 물체 이름 조회용 레지스트리
            coupling: 관절 구속 객체 (관절이 독점 소유)
        """
        self._init_listeners()
        self._registry = registry
        self._coupling = coupling
        self._body_a: Optional[str] = None
        self._body_b: Optional[str] = None
        self._tca = RigidTransform.identity()
        self._tdb = RigidTransform.identity()
        self._axis_length = get_config().joint.axis_length
        self._render_props = self.default_render_props()
        self._compliance = np.zeros(6)
        self._damping = np.zeros(6)

    @classmethod
    def default_render_props(cls) -> RenderProps:
        return RenderProps()

    @property
    def coupling(self):
        return self._coupling

    @property
    def registry(self) -> BodyRegistry:
        return self._registry

    # ─────────── 물체 연결 ───────────

    def _name_of(self, body: BodyRef) -> str:
        name = body.name if isinstance(body, RigidBody) else body
        if name not in self._registry:
            raise KeyError(f"등록되지 않은 강체: '{name}'")
        return name

    def set_bodies(
        self,
        a: BodyRef,
        tca: RigidTransform,
        b: Optional[BodyRef] = None,
        tdb: Optional[RigidTransform] = None,
    ):
        """물체 연결.

        Args:
            a: 물체 A (이름 또는 RigidBody)
            tca: C → A 변환
            b: 물체 B. None이면 접지
            tdb: D → B 변환 (B가 None이면 D → 월드)
        """
        self._body_a = self._name_of(a)
        self._body_b = None if b is None else self._name_of(b)
        self._tca = tca.copy()
        self._tdb = RigidTransform.identity() if tdb is None else tdb.copy()
        self._coupling.update_coordinates(self.get_current_tcd())
        logger.debug(f"{type(self).__name__}: 연결 A={self._body_a}, B={self._body_b or '접지'}")

    def set_bodies_from_world(self, a: BodyRef, b: Optional[BodyRef], tdw: RigidTransform):
        """연결 시점에 C = D = TDW 가 되도록 물체 연결."""
        body_a = self._registry.get(self._name_of(a))
        tca = body_a.pose.inverse() @ tdw
        if b is None:
            self.set_bodies(body_a.name, tca, None, tdw)
        else:
            body_b = self._registry.get(self._name_of(b))
            self.set_bodies(body_a.name, tca, body_b.name, body_b.pose.inverse() @ tdw)

    def detach(self):
        self._body_a = None
        self._body_b = None

    def is_connected_to_bodies(self) -> bool:
        return self._body_a is not None

    @property
    def body_a(self) -> Optional[str]:
        return self._body_a

    @property
    def body_b(self) -> Optional[str]:
        return self._body_b

    def get_tca(self) -> RigidTransform:
        return self._tca.copy()

    def get_tdb(self) -> RigidTransform:
        return self._tdb.copy()

    # ─────────── 현재 프레임 ───────────

    def get_current_tcw(self) -> Optional[RigidTransform]:
        if self._body_a is None:
            return None
        return self._registry.get(self._body_a).pose @ self._tca

    def get_current_tdw(self) -> RigidTransform:
        if self._body_b is None:
            return self._tdb.copy()
        return self._registry.get(self._body_b).pose @ self._tdb

    def get_current_tcd(self) -> Optional[RigidTransform]:
        """TCD = TDW⁻¹·TCW. 미연결이면 None."""
        tcw = self.get_current_tcw()
        if tcw is None:
            return None
        return self.get_current_tdw().inverse() @ tcw

    def adjust_poses(self, tgd: RigidTransform):
        """TCD = TGD 가 되도록 물체 자세 보정.

        B가 있고 동적이면 B를 움직이고 (TDW' = TCW·TGD⁻¹),
        그렇지 않으면 A를 움직인다 (TCW' = TDW·TGD).
        """
        if self._body_a is None:
            return
        body_b = None if self._body_b is None else self._registry.get(self._body_b)
        if body_b is not None and body_b.dynamic:
            tdw = self.get_current_tcw() @ tgd.inverse()
            body_b.set_pose(tdw @ self._tdb.inverse())
            logger.debug(f"{type(self).__name__}: 물체 B '{body_b.name}' 자세 보정")
        else:
            body_a = self._registry.get(self._body_a)
            tcw = self.get_current_tdw() @ tgd
            body_a.set_pose(tcw @ self._tca.inverse())
            logger.debug(f"{type(self).__name__}: 물체 A '{body_a.name}' 자세 보정")

    # ─────────── 속성 ───────────

    @property
    def axis_length(self) -> float:
        return self._axis_length

    @axis_length.setter
    def axis_length(self, value: float):
        if value < 0:
            raise FEAValidationError(
                f"축 길이({value})가 음수입니다.",
                parameter="axis_length",
                value=value,
            )
        self._axis_length = float(value)
        self.notify_host_of_property_change("axis_length")

    @property
    def render_props(self) -> RenderProps:
        return self._render_props

    @render_props.setter
    def render_props(self, props: RenderProps):
        self._render_props = props.copy()
        self.notify_host_of_property_change("render_props")

    @property
    def compliance(self) -> np.ndarray:
        return self._compliance.copy()

    @compliance.setter
    def compliance(self, values):
        self._compliance = validate_nonnegative_vector(values, 6, "compliance")
        self.notify_host_of_property_change("compliance")

    @property
    def damping(self) -> np.ndarray:
        return self._damping.copy()

    @damping.setter
    def damping(self, values):
        self._damping = validate_nonnegative_vector(values, 6, "damping")
        self.notify_host_of_property_change("damping")
