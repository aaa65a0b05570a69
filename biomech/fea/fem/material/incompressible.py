"""비압축성 재료: 평균 압력(라그랑주 승수) 기반 체적 응답.

요소가 적분점 J로부터 평균 압력 p = U'(J)를 계산해 DeformedPoint에 넣고,
재료는 구성 평가 동안 p를 고정값으로 사용한다:

    σ_vol = p·I
    c_vol = p·(I⊗I - 2𝕀)

체적 퍼텐셜 U(J):
- QUADRATIC:   U = κ/2·(J - 1)²
- LOGARITHMIC: U = κ/2·ln²(J)
"""

import enum
import math
import numpy as np

from pydantic import model_validator

from .base import FemMaterial
from .params import ParamsModel
from ..core import tensor
from ..validation import validate_bulk_modulus


class BulkPotential(str, enum.Enum):
    """체적 퍼텐셜 종류."""
    QUADRATIC = "quadratic"
    LOGARITHMIC = "logarithmic"


class IncompressibleParams(ParamsModel):
    """비압축성 재료 공통 파라미터."""

    bulk_modulus: float = 100000.0
    bulk_potential: BulkPotential = BulkPotential.QUADRATIC

    @model_validator(mode="after")
    def _check_bulk(self):
        validate_bulk_modulus(self.bulk_modulus, type(self).__name__)
        return self


class IncompressibleMaterialBase(FemMaterial):
    """체적 퍼텐셜 + 평균 압력 처리를 공유하는 비압축성 재료 기반."""

    Params = IncompressibleParams

    def is_incompressible(self) -> bool:
        return True

    @property
    def bulk_modulus(self) -> float:
        return self.params.bulk_modulus

    @bulk_modulus.setter
    def bulk_modulus(self, value: float):
        self._update_params(bulk_modulus=value)

    @property
    def bulk_potential(self) -> BulkPotential:
        return self.params.bulk_potential

    @bulk_potential.setter
    def bulk_potential(self, value):
        self._update_params(bulk_potential=BulkPotential(value))

    # ─────────── 체적 퍼텐셜 (요소 측에서 사용) ───────────

    def compute_pressure(self, J: float) -> float:
        """평균 압력 p = dU/dJ."""
        return self.compute_dudj(J)

    def compute_dudj(self, J: float) -> float:
        kappa = self.params.bulk_modulus
        if self.params.bulk_potential == BulkPotential.QUADRATIC:
            return kappa * (J - 1.0)
        if J <= 0.0:
            return 0.0
        return kappa * math.log(J) / J

    def compute_d2udj2(self, J: float) -> float:
        kappa = self.params.bulk_modulus
        if self.params.bulk_potential == BulkPotential.QUADRATIC:
            return kappa
        if J <= 0.0:
            return kappa
        return kappa * (1.0 - math.log(J)) / (J * J)

    # ─────────── 압력 기여 ───────────

    @staticmethod
    def _pressure_stress(point) -> np.ndarray:
        return point.average_pressure * np.eye(3)

    @staticmethod
    def _pressure_tangent_4(point) -> np.ndarray:
        return tensor.pressure_tangent(point.average_pressure)


class IncompressibleMaterial(IncompressibleMaterialBase):
    """체적 응답만 가지는 재료 (편향 재료와 조합하거나 단독 사용)."""

    def __init__(
        self,
        bulk_modulus: float = 100000.0,
        bulk_potential: BulkPotential = BulkPotential.QUADRATIC,
        visco_behavior=None,
    ):
        """초기화.

        Args:
            bulk_modulus: 체적 탄성 계수 κ [Pa]
            bulk_potential: 체적 퍼텐셜 종류
            visco_behavior: 점탄성 거동
        """
        super().__init__(
            visco_behavior,
            bulk_modulus=bulk_modulus,
            bulk_potential=bulk_potential,
        )

    def _compute_stress(self, point, Q, base_mat):
        return self._pressure_stress(point)

    def _compute_tangent(self, sigma, point, Q, base_mat):
        return tensor.to_voigt_4(self._pressure_tangent_4(point))
