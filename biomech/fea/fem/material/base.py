"""FEM 구성 재료 추상 클래스.

모든 재료는 적분점 변형 상태(DeformedPoint)로부터 다음을 계산한다:
- compute_stress: Cauchy 응력 σ (대칭 3×3)
- compute_tangent: 공간 접선 강성 D (6×6, Voigt 쌍 11, 22, 33, 12, 23, 13)

접선은 Green-Lagrange 변형률에 대한 응력 도함수의 push-forward
c = J⁻¹·F F (∂S/∂E) Fᵀ Fᵀ 와 일치해야 한다 (Newton 수렴 조건).

실패 정책: 구성 평가는 예외를 던지지 않는다. 비가역 재료에 J ≤ 0이 들어오면
σ = 0, D = 미소변형 탄성 텐서를 돌려주고, 요소는 is_invertible()로 판단한다.
"""

import abc
import copy
import logging
import numpy as np
from typing import Optional, Tuple

from ..core.deformed_point import DeformedPoint
from ..core import tensor
from ..validation import InvalidDeformationError
from .params import Parameterized
from .viscoelastic import MaterialStateObject, ViscoelasticBehavior
from ....config import get_config
from ....utils.properties import PropertyInfo

logger = logging.getLogger(__name__)


class FemMaterial(Parameterized, abc.ABC):
    """구성 재료 추상 클래스."""

    PROPERTIES = (
        PropertyInfo("visco_behavior", "점탄성 거동 (없으면 None)", None),
    )

    def __init__(self, visco_behavior: Optional[ViscoelasticBehavior] = None, **params):
        """재료 초기화.

        Args:
            visco_behavior: 점탄성 거동 (복제되어 소유됨)
            **params: 재료별 파라미터 (Params 레코드 필드)
        """
        self._init_params(**params)
        self._visco_behavior: Optional[ViscoelasticBehavior] = None
        if visco_behavior is not None:
            self._attach_behavior(visco_behavior.clone())

    # ─────────── 구현부 (하위 클래스) ───────────

    @abc.abstractmethod
    def _compute_stress(
        self, point: DeformedPoint, Q: np.ndarray, base_mat: Optional["FemMaterial"]
    ) -> np.ndarray:
        """Cauchy 응력 계산 (J > 0 또는 가역 재료에서만 호출)."""

    @abc.abstractmethod
    def _compute_tangent(
        self,
        sigma: np.ndarray,
        point: DeformedPoint,
        Q: np.ndarray,
        base_mat: Optional["FemMaterial"],
    ) -> np.ndarray:
        """공간 접선 6×6 계산."""

    def get_elasticity_tensor(self) -> np.ndarray:
        """미소변형 접선 (F = I 기준, 6×6). 반전 변형 시 대체 접선으로도 사용."""
        point = DeformedPoint.from_gradient(np.eye(3))
        with np.errstate(all="ignore"):
            D = self._compute_tangent(np.zeros((3, 3)), point, np.eye(3), None)
        if not np.all(np.isfinite(D)):
            return np.zeros((6, 6))
        return tensor.symmetrize(D)

    # ─────────── 공개 평가 ───────────

    def compute_stress(
        self,
        point: DeformedPoint,
        Q: Optional[np.ndarray] = None,
        base_mat: Optional["FemMaterial"] = None,
    ) -> np.ndarray:
        """Cauchy 응력 계산.

        Args:
            point: 적분점 변형 상태
            Q: 이방성 기저 (열 = 재료 축). None이면 단위 행렬
            base_mat: 파생 재료가 파라미터를 가져올 기반 재료

        Returns:
            σ (대칭 3×3, 항상 유한)
        """
        if point.det_f <= 0.0 and not self.is_invertible():
            logger.debug(
                f"{type(self).__name__}: 반전 변형 J={point.det_f:.4g} "
                f"(요소 {point.element_number}), 응력 0 반환"
            )
            return np.zeros((3, 3))
        with np.errstate(all="ignore"):
            sigma = self._compute_stress(point, _frame(Q), base_mat)
        if not np.all(np.isfinite(sigma)):
            logger.warning(
                f"{type(self).__name__}: 비유한 응력 (J={point.det_f:.4g}, "
                f"요소 {point.element_number}), 응력 0 반환"
            )
            return np.zeros((3, 3))
        return tensor.symmetrize(sigma)

    def compute_tangent(
        self,
        sigma: np.ndarray,
        point: DeformedPoint,
        Q: Optional[np.ndarray] = None,
        base_mat: Optional["FemMaterial"] = None,
    ) -> np.ndarray:
        """접선 강성 계산.

        Args:
            sigma: 같은 상태에서 compute_stress가 반환한 응력
            point: 적분점 변형 상태
            Q: 이방성 기저
            base_mat: 기반 재료

        Returns:
            D (대칭 6×6, 항상 유한)
        """
        if point.det_f <= 0.0 and not self.is_invertible():
            return self.get_elasticity_tensor()
        with np.errstate(all="ignore"):
            D = self._compute_tangent(sigma, point, _frame(Q), base_mat)
        if not np.all(np.isfinite(D)):
            logger.warning(
                f"{type(self).__name__}: 비유한 접선 (J={point.det_f:.4g}), 초기 탄성 텐서로 대체"
            )
            return self.get_elasticity_tensor()
        return tensor.symmetrize(D)

    def compute_stress_and_tangent(
        self,
        point: DeformedPoint,
        Q: Optional[np.ndarray] = None,
        excitation: float = 0.0,
        want_tangent: bool = True,
        state: Optional[MaterialStateObject] = None,
    ) -> Tuple[np.ndarray, Optional[np.ndarray]]:
        """응력과 (선택) 접선을 순서대로 계산.

        수동 재료는 excitation을 사용하지 않는다. 점탄성 거동이 있으면
        state의 이력으로 응력/접선을 보정하고, state가 없으면 순간 응답을 쓴다.

        Returns:
            (sigma, D 또는 None)
        """
        sigma = self.compute_stress(point, Q, None)
        D = self.compute_tangent(sigma, point, Q, None) if want_tangent else None
        if self._visco_behavior is not None:
            sigma = self._visco_behavior.compute_stress(sigma, state)
            if D is not None:
                D = self._visco_behavior.compute_tangent(D, state)
        return sigma, D

    def validate_deformation(self, point: DeformedPoint):
        """요소 측 반전 검사 (선택적). 구성 평가 자체는 예외를 던지지 않는다.

        Raises:
            InvalidDeformationError: 비가역 재료에서 J ≤ 0
        """
        if point.det_f <= 0.0 and not self.is_invertible():
            raise InvalidDeformationError(
                f"{type(self).__name__}은(는) J={point.det_f:.4g} ≤ 0에서 정의되지 않습니다. "
                f"스텝을 줄이거나 가역 재료를 사용하세요.",
                det_f=point.det_f,
                element_number=point.element_number,
            )

    # ─────────── 능력 플래그 ───────────

    def is_invertible(self) -> bool:
        """J ≤ 0에서도 정의되는지 여부."""
        return False

    def is_incompressible(self) -> bool:
        return False

    def is_viscoelastic(self) -> bool:
        return self._visco_behavior is not None

    def is_linear(self) -> bool:
        """응력이 변형률에 아핀 → 접선 사전 계산 가능."""
        return False

    def is_corotated(self) -> bool:
        """평가 전에 회전 성분을 제거해야 하는지 여부."""
        return False

    def has_state(self) -> bool:
        return self._visco_behavior is not None and not self.is_linear()

    def create_state_object(self) -> Optional[MaterialStateObject]:
        if self.has_state():
            return self._visco_behavior.create_state()
        return None

    # ─────────── 점탄성 / 복제 / 동등성 ───────────

    @property
    def visco_behavior(self) -> Optional[ViscoelasticBehavior]:
        return self._visco_behavior

    @visco_behavior.setter
    def visco_behavior(self, behavior: Optional[ViscoelasticBehavior]):
        self.set_visco_behavior(behavior)

    def set_visco_behavior(self, behavior: Optional[ViscoelasticBehavior]):
        """점탄성 거동 설정 (복제본 소유). None이면 제거."""
        if behavior is not None:
            self._attach_behavior(behavior.clone())
            self.notify_host_of_property_change("visco_behavior")
        elif self._visco_behavior is not None:
            self._attach_behavior(None)
            self.notify_host_of_property_change("visco_behavior")

    def _attach_behavior(self, behavior: Optional[ViscoelasticBehavior]):
        """소유 거동 교체. 거동의 파라미터 변경은 "visco_behavior" 변경으로 전달된다."""
        if self._visco_behavior is not None:
            self._visco_behavior.remove_change_listener(self._on_behavior_changed)
        self._visco_behavior = behavior
        if behavior is not None:
            behavior.add_change_listener(self._on_behavior_changed)

    def _on_behavior_changed(self, source, name: str):
        self.notify_host_of_property_change("visco_behavior")

    def clone(self) -> "FemMaterial":
        """깊은 복사 (점탄성 거동 포함, 리스너 제외)."""
        new = copy.copy(self)
        new._listeners = []
        new._visco_behavior = None
        if self._visco_behavior is not None:
            new._attach_behavior(self._visco_behavior.clone())
        new._on_params_changed()
        return new

    def __eq__(self, other) -> bool:
        if not isinstance(other, FemMaterial):
            return NotImplemented
        return (
            type(self) is type(other)
            and self._visco_behavior == other._visco_behavior
            and self.params == other.params
        )

    __hash__ = None

    # ─────────── 운동학 보조 ───────────

    @staticmethod
    def compute_right_cauchy_green(point: DeformedPoint) -> np.ndarray:
        """C = FᵀF."""
        F = point.F
        return F.T @ F

    @staticmethod
    def compute_left_cauchy_green(point: DeformedPoint) -> np.ndarray:
        """B = FFᵀ."""
        F = point.F
        return F @ F.T

    @staticmethod
    def compute_dev_right_cauchy_green(point: DeformedPoint) -> np.ndarray:
        """C̃ = J^(-2/3)·C."""
        F = point.F
        return np.cbrt(point.det_f) ** -2 * (F.T @ F)

    @staticmethod
    def compute_dev_left_cauchy_green(point: DeformedPoint) -> np.ndarray:
        """B̃ = J^(-2/3)·B."""
        F = point.F
        return np.cbrt(point.det_f) ** -2 * (F @ F.T)

    @staticmethod
    def cauchy_to_second_pk_stress(sigma: np.ndarray, point: DeformedPoint) -> np.ndarray:
        """S = J F⁻¹ σ F⁻ᵀ."""
        Finv = np.linalg.inv(point.F)
        return point.det_f * (Finv @ sigma @ Finv.T)

    @staticmethod
    def second_pk_to_cauchy_stress(S: np.ndarray, point: DeformedPoint) -> np.ndarray:
        """σ = (1/J) F S Fᵀ."""
        F = point.F
        return (F @ S @ F.T) / point.det_f

    # ─────────── 수치 일관 접선 ───────────

    def _numerical_tangent(
        self,
        point: DeformedPoint,
        Q: np.ndarray,
        base_mat: Optional["FemMaterial"],
    ) -> np.ndarray:
        """F 섭동 중심차분으로 공간 접선 계산.

        각 Voigt 대칭 단위 G에 대해 F± = (I ± hG)F 로 섭동하고
        Kirchhoff 응력 τ = Jσ 의 변화에서 J c:G = dτ/dh - (Gτ + τG) 를 얻는다.
        평균 압력은 고정된다.
        """
        h = get_config().material.tangent_perturbation
        F = point.F
        J = point.det_f
        tau = J * self._compute_stress(point, Q, base_mat)
        probe = DeformedPoint.from_gradient(F, point.average_pressure, point.R)
        D = np.zeros((6, 6))
        for a in range(6):
            G = tensor.voigt_unit(a)
            probe.set_f((np.eye(3) + h * G) @ F)
            tau_p = probe.det_f * self._compute_stress(probe, Q, base_mat)
            probe.set_f((np.eye(3) - h * G) @ F)
            tau_m = probe.det_f * self._compute_stress(probe, Q, base_mat)
            dtau = (tau_p - tau_m) / (2.0 * h)
            cG = (dtau - (G @ tau + tau @ G)) / J
            D[:, a] = tensor.to_voigt_2(tensor.symmetrize(cG))
        return D

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.params.model_dump().items())
        return f"{type(self).__name__}({fields})"


def _frame(Q: Optional[np.ndarray]) -> np.ndarray:
    if Q is None:
        return np.eye(3)
    return np.asarray(Q, dtype=np.float64)
