"""강체(Rigid Body) 정의.

관절이 연결하는 비변형 물체를 표현한다. 강체는 이름과 자세(pose, 물체 → 월드
강체 변환)를 가지며, 관절은 강체 객체가 아니라 이름만 저장하고
BodyRegistry를 통해 조회한다.
"""

import logging
import numpy as np
from typing import Dict, Iterator, Optional

from ...utils.transform import RigidTransform
from ..fem.validation import FEAValidationError

logger = logging.getLogger(__name__)


class RigidBody:
    """강체 물체.

    Attributes:
        name: 레지스트리 키
        pose: 물체 좌표계 → 월드 변환 (TBW)
        dynamic: False면 고정(접지)된 물체로 취급 (관절 자세 보정 대상 아님)
    """

    def __init__(
        self,
        name: str,
        pose: Optional[RigidTransform] = None,
        dynamic: bool = True,
        vertices: Optional[np.ndarray] = None,
    ):
        """강체 생성.

        Args:
            name: 물체 이름
            pose: 초기 자세 (기본: 단위 변환)
            dynamic: 동적 물체 여부
            vertices: 물체 좌표계 정점 (n_vertices, 3), 선택
        """
        if not name:
            raise FEAValidationError("강체 이름이 비어 있습니다.", parameter="name")
        self.name = name
        self.pose = pose.copy() if pose is not None else RigidTransform.identity()
        self.dynamic = dynamic
        if vertices is None:
            self._vertices = np.zeros((0, 3))
        else:
            self._vertices = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)

    def set_pose(self, pose: RigidTransform):
        self.pose = pose.copy()

    def get_positions(self) -> np.ndarray:
        """물체 좌표계 정점."""
        return self._vertices

    def get_current_positions(self) -> np.ndarray:
        """월드 좌표 정점 (현재 자세 적용)."""
        return self.pose.apply(self._vertices)

    @property
    def n_points(self) -> int:
        return len(self._vertices)

    def __repr__(self) -> str:
        return f"RigidBody({self.name!r}, p={self.pose.p}, dynamic={self.dynamic})"


class BodyRegistry:
    """이름 → 강체 매핑."""

    def __init__(self):
        self._bodies: Dict[str, RigidBody] = {}

    def add(self, body: RigidBody) -> RigidBody:
        """강체 등록.

        Raises:
            FEAValidationError: 같은 이름이 이미 있음
        """
        if body.name in self._bodies:
            raise FEAValidationError(
                f"강체 '{body.name}'이(가) 이미 등록되어 있습니다.",
                parameter="name",
                value=body.name,
            )
        self._bodies[body.name] = body
        return body

    def get(self, name: str) -> RigidBody:
        """이름으로 조회.

        Raises:
            KeyError: 등록되지 않은 이름
        """
        if name not in self._bodies:
            raise KeyError(f"등록되지 않은 강체: '{name}'")
        return self._bodies[name]

    def remove(self, name: str) -> Optional[RigidBody]:
        return self._bodies.pop(name, None)

    def __contains__(self, name: str) -> bool:
        return name in self._bodies

    def __len__(self) -> int:
        return len(self._bodies)

    def __iter__(self) -> Iterator[RigidBody]:
        return iter(list(self._bodies.values()))
