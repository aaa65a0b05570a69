"""평면 관절 구속 (3 자유도: x, y, θ).

프레임 C(물체 A 부착)와 D(물체 B 또는 월드 부착) 사이의 상대 변환 TCD를
구속 다양체에 사영해 TGD를 얻는다:

- 회전: TCD.R의 국소 z축을 +z로 보내는 최소 회전을 앞에 곱한 뒤 z축 회전각 θ를 읽는다
- 병진: TCD.p의 z 성분을 버린다

구속 방향은 z 병진과 두 면외 회전(ω_x, ω_y)이다. 이 층에서 θ는 라디안이며,
범위 밖 값은 감싸지 않고 끝점으로 자른다.
"""

import logging
import math
import numpy as np
from scipy.spatial.transform import Rotation
from typing import Optional, Sequence, Tuple

from .interval import DoubleInterval
from ....config import get_config
from ....utils.transform import RigidTransform, rotation_taking, z_rotation

logger = logging.getLogger(__name__)

_EZ = np.array([0.0, 0.0, 1.0])


class PlanarCoupling:
    """평면 관절 양방향 구속."""

    X_IDX = 0
    Y_IDX = 1
    THETA_IDX = 2
    NUM_COORDINATES = 3

    def __init__(self):
        cfg = get_config().joint
        self.break_speed = cfg.break_speed
        self.break_accel = cfg.break_accel
        self.contact_distance = cfg.contact_distance
        self._coords = np.zeros(self.NUM_COORDINATES)
        self._ranges = [DoubleInterval() for _ in range(self.NUM_COORDINATES)]

    # ─────────── 사영 / 좌표 ───────────

    @staticmethod
    def project_to_constraints(tcd: RigidTransform) -> RigidTransform:
        """TCD → TGD (구속 다양체 위의 가장 가까운 변환). 멱등."""
        R = rotation_taking(tcd.R[:, 2], _EZ) @ tcd.R
        theta = math.atan2(R[1, 0], R[0, 0])
        return RigidTransform(z_rotation(theta), (tcd.p[0], tcd.p[1], 0.0))

    def coordinates_from_tgd(self, tgd: RigidTransform) -> np.ndarray:
        """(x, y, θ). θ는 마지막 저장값에 가장 가까운 대표값."""
        theta = math.atan2(tgd.R[1, 0], tgd.R[0, 0])
        ref = self._coords[self.THETA_IDX]
        theta += 2.0 * math.pi * round((ref - theta) / (2.0 * math.pi))
        return np.array([tgd.p[0], tgd.p[1], theta])

    @staticmethod
    def tgd_from_coordinates(x: float, y: float, theta: float) -> RigidTransform:
        return RigidTransform(z_rotation(theta), (x, y, 0.0))

    def update_coordinates(self, tcd: RigidTransform) -> np.ndarray:
        """TCD를 사영해 좌표를 저장하고 반환."""
        self._coords = self.coordinates_from_tgd(self.project_to_constraints(tcd))
        return self._coords.copy()

    def get_coordinates(self) -> np.ndarray:
        return self._coords.copy()

    def get_coordinate(self, idx: int, tcd: Optional[RigidTransform] = None) -> float:
        """좌표 읽기. TCD가 없으면 (미연결) 마지막 저장값."""
        if tcd is not None:
            self.update_coordinates(tcd)
        return float(self._coords[idx])

    def set_coordinate(
        self, idx: int, value: float, tcd: Optional[RigidTransform] = None
    ) -> Optional[RigidTransform]:
        """범위로 자른 값을 저장. TCD가 있으면 해당 좌표를 바꾼 TGD 반환."""
        if tcd is not None:
            self.update_coordinates(tcd)
        clipped = self._ranges[idx].make_valid(value)
        if clipped != value:
            logger.debug(f"좌표 {idx}: {value:.6g} → 범위 {self._ranges[idx]}로 자름 ({clipped:.6g})")
        self._coords[idx] = clipped
        if tcd is None:
            return None
        return self.tgd_from_coordinates(*self._coords)

    def get_x(self, tcd: Optional[RigidTransform] = None) -> float:
        return self.get_coordinate(self.X_IDX, tcd)

    def get_y(self, tcd: Optional[RigidTransform] = None) -> float:
        return self.get_coordinate(self.Y_IDX, tcd)

    def get_theta(self, tcd: Optional[RigidTransform] = None) -> float:
        """θ [rad]."""
        return self.get_coordinate(self.THETA_IDX, tcd)

    def set_x(self, x: float, tcd: Optional[RigidTransform] = None) -> Optional[RigidTransform]:
        return self.set_coordinate(self.X_IDX, x, tcd)

    def set_y(self, y: float, tcd: Optional[RigidTransform] = None) -> Optional[RigidTransform]:
        return self.set_coordinate(self.Y_IDX, y, tcd)

    def set_theta(self, theta: float, tcd: Optional[RigidTransform] = None) -> Optional[RigidTransform]:
        """θ [rad] 설정."""
        return self.set_coordinate(self.THETA_IDX, theta, tcd)

    # ─────────── 범위 ───────────

    def set_coordinate_range(self, idx: int, lower: float, upper: float):
        self._ranges[idx] = DoubleInterval(lower, upper)

    def get_coordinate_range(self, idx: int) -> DoubleInterval:
        return self._ranges[idx].copy()

    def _set_bound(self, idx: int, lower: Optional[float] = None, upper: Optional[float] = None):
        rng = self._ranges[idx]
        self.set_coordinate_range(
            idx,
            rng.lower if lower is None else lower,
            rng.upper if upper is None else upper,
        )

    def set_minimum_x(self, value: float):
        self._set_bound(self.X_IDX, lower=value)

    def set_maximum_x(self, value: float):
        self._set_bound(self.X_IDX, upper=value)

    def set_minimum_y(self, value: float):
        self._set_bound(self.Y_IDX, lower=value)

    def set_maximum_y(self, value: float):
        self._set_bound(self.Y_IDX, upper=value)

    def set_minimum_theta(self, value: float):
        """하한 [rad]."""
        self._set_bound(self.THETA_IDX, lower=value)

    def set_maximum_theta(self, value: float):
        """상한 [rad]."""
        self._set_bound(self.THETA_IDX, upper=value)

    # ─────────── 구속 오차 / 한계 ───────────

    @staticmethod
    def constraint_errors(tcd: RigidTransform) -> Tuple[float, float, float]:
        """(δz, ω_x, ω_y): z 병진과 면외 기울기 회전 벡터. 다양체 위에서 모두 0."""
        tilt = rotation_taking(_EZ, tcd.R[:, 2])
        w = Rotation.from_matrix(tilt).as_rotvec()
        return float(tcd.p[2]), float(w[0]), float(w[1])

    def limit_engagement(self, coords: Optional[Sequence[float]] = None) -> np.ndarray:
        """좌표별 한계 접촉: 상한 근처 +1, 하한 근처 -1, 그 외 0."""
        values = self._coords if coords is None else np.asarray(coords, dtype=np.float64)
        out = np.zeros(self.NUM_COORDINATES, dtype=np.int64)
        for idx, rng in enumerate(self._ranges):
            c = values[idx]
            if math.isfinite(rng.upper) and rng.upper - c <= self.contact_distance:
                out[idx] = 1
            elif math.isfinite(rng.lower) and c - rng.lower <= self.contact_distance:
                out[idx] = -1
        return out

    def copy(self) -> "PlanarCoupling":
        """같은 범위를 가진 새 구속 (좌표는 0)."""
        new = PlanarCoupling()
        new._ranges = [rng.copy() for rng in self._ranges]
        return new
