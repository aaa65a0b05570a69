"""변형점(DeformedPoint): 적분점 변형 상태 스냅샷.

요소가 적분점을 평가하면서 채우고, 재료가 구성 평가 동안 읽기 전용으로 소비한다.
변형 구배 F와 그 행렬식 J = det F는 set_f()로만 함께 갱신되며 절대 어긋나지 않는다.
"""

import numpy as np
from typing import Optional, Sequence

from ..validation import FEAValidationError, validate_node_weights
from ....utils.transform import orthonormalize


def _frozen(a: np.ndarray) -> np.ndarray:
    a.flags.writeable = False
    return a


class DeformedPoint:
    """적분점 변형 상태.

    Attributes:
        F: 변형 구배 (3×3, 읽기 전용)
        det_f: J = det F
        R: 공회전(corotation) 회전 행렬 또는 None
        average_pressure: 평균 정수압 p (비압축 재료의 라그랑주 승수)
        rest_pos / spatial_pos: 기준/현재 위치
        element_number / point_index: 요소 번호, 요소 내 적분점 인덱스
        node_numbers / node_weights: 절점 번호와 형상함수 가중치 (같은 길이)
    """

    def __init__(self):
        self.reset()

    @classmethod
    def from_gradient(
        cls,
        F: np.ndarray,
        pressure: float = 0.0,
        R: Optional[np.ndarray] = None,
    ) -> "DeformedPoint":
        """변형 구배에서 바로 생성 (요소 코드 / 테스트용)."""
        point = cls()
        point.set_f(F)
        point.set_average_pressure(pressure)
        point.set_r(R)
        return point

    def reset(self):
        """빈 상태로 초기화."""
        self._F = _frozen(np.zeros((3, 3)))
        self._det_f = 0.0
        self._R: Optional[np.ndarray] = None
        self._p = 0.0
        self._rest_pos = _frozen(np.zeros(3))
        self._spatial_pos = _frozen(np.zeros(3))
        self._elem_num = -1
        self._point_idx = -1
        self._node_numbers: tuple = ()
        self._node_weights: tuple = ()

    # ─────────── 변형 구배 ───────────

    @property
    def F(self) -> np.ndarray:
        return self._F

    @property
    def det_f(self) -> float:
        return self._det_f

    @property
    def is_inverted(self) -> bool:
        """J ≤ 0 여부."""
        return self._det_f <= 0.0

    def set_f(self, M: np.ndarray):
        """F 복사 + det F 재계산."""
        M = np.array(M, dtype=np.float64)
        if M.shape != (3, 3):
            raise FEAValidationError(
                f"변형 구배 형상이 {M.shape}입니다. (3, 3)이어야 합니다.",
                parameter="F",
                value=M.shape,
            )
        self._F = _frozen(M)
        self._det_f = float(np.linalg.det(M))

    # ─────────── 압력 / 회전 ───────────

    @property
    def average_pressure(self) -> float:
        return self._p

    def set_average_pressure(self, p: float):
        self._p = float(p)

    @property
    def R(self) -> Optional[np.ndarray]:
        return self._R

    def set_r(self, M: Optional[np.ndarray]):
        """공회전 회전 설정. None이면 제거, 아니면 정규직교화한 복사본 저장."""
        if M is None:
            self._R = None
            return
        self._R = _frozen(orthonormalize(M))

    # ─────────── 위치 / 출처 ───────────

    @property
    def rest_pos(self) -> np.ndarray:
        return self._rest_pos

    @property
    def spatial_pos(self) -> np.ndarray:
        return self._spatial_pos

    def set_positions(self, rest_pos: Sequence[float], spatial_pos: Sequence[float]):
        self._rest_pos = _frozen(np.array(rest_pos, dtype=np.float64).reshape(3))
        self._spatial_pos = _frozen(np.array(spatial_pos, dtype=np.float64).reshape(3))

    @property
    def element_number(self) -> int:
        return self._elem_num

    @property
    def point_index(self) -> int:
        return self._point_idx

    @property
    def node_numbers(self) -> tuple:
        return self._node_numbers

    @property
    def node_weights(self) -> tuple:
        return self._node_weights

    def set_provenance(
        self,
        element_number: int,
        point_index: int,
        node_numbers: Sequence[int],
        node_weights: Sequence[float],
    ):
        """요소/적분점 출처 설정.

        Raises:
            FEAValidationError: 번호/가중치 길이 불일치 또는 가중치 합 ≠ 1
        """
        validate_node_weights(node_numbers, node_weights)
        self._elem_num = int(element_number)
        self._point_idx = int(point_index)
        self._node_numbers = tuple(int(n) for n in node_numbers)
        self._node_weights = tuple(float(w) for w in node_weights)

    def __repr__(self) -> str:
        return (
            f"DeformedPoint(elem={self._elem_num}, idx={self._point_idx}, "
            f"J={self._det_f:.6g}, p={self._p:.6g}, corotated={self._R is not None})"
        )
