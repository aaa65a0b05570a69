"""Ogden 비압축 초탄성 재료 (최대 6항).

변형 에너지 밀도 (편향 주신장 λ̃ₐ, b̃ = J^(-2/3)·B의 고유값 제곱근):
W̃ = Σᵢ 2μᵢ/αᵢ² · (λ̃₁^αᵢ + λ̃₂^αᵢ + λ̃₃^αᵢ - 3) + U(J)

주축 가상 Kirchhoff 응력:
τ̄ₐ = λ̃ₐ·∂W̃/∂λ̃ₐ = Σᵢ (2μᵢ/αᵢ)·λ̃ₐ^αᵢ

σ = (1/J)·Σₐ dev(τ̄)ₐ·nₐ⊗nₐ + p·I

α = 2 한 항이면 G = μ 인 비압축 Neo-Hookean과 같다.
주축이 겹치는 경우의 해석 접선은 분기가 많으므로 F 섭동 수치 접선을 쓴다.

참고문헌:
- Ogden, "Non-Linear Elastic Deformations" (1984)
"""

import numpy as np
from typing import Tuple

from pydantic import model_validator

from .incompressible import BulkPotential, IncompressibleMaterialBase, IncompressibleParams
from ..validation import validate_ogden


class OgdenParams(IncompressibleParams):
    mu: Tuple[float, ...] = (150000.0,)
    alpha: Tuple[float, ...] = (2.0,)

    @model_validator(mode="after")
    def _check_ogden(self):
        validate_ogden(self.mu, self.alpha)
        return self


class OgdenMaterial(IncompressibleMaterialBase):
    """Ogden 다항 초탄성 재료."""

    Params = OgdenParams

    def __init__(
        self,
        mu: Tuple[float, ...] = (150000.0,),
        alpha: Tuple[float, ...] = (2.0,),
        bulk_modulus: float = 100000.0,
        bulk_potential: BulkPotential = BulkPotential.QUADRATIC,
        visco_behavior=None,
    ):
        """초기화.

        Args:
            mu: 항별 계수 μᵢ [Pa]
            alpha: 항별 지수 αᵢ
            bulk_modulus: 체적 탄성 계수 κ [Pa]
            bulk_potential: 체적 퍼텐셜 종류
            visco_behavior: 점탄성 거동
        """
        super().__init__(
            visco_behavior,
            mu=mu,
            alpha=alpha,
            bulk_modulus=bulk_modulus,
            bulk_potential=bulk_potential,
        )

    @property
    def mu(self) -> Tuple[float, ...]:
        return self.params.mu

    @mu.setter
    def mu(self, value):
        self._update_params(mu=tuple(value))

    @property
    def alpha(self) -> Tuple[float, ...]:
        return self.params.alpha

    @alpha.setter
    def alpha(self, value):
        self._update_params(alpha=tuple(value))

    def set_term(self, i: int, mu: float, alpha: float):
        """i번째 항 (μᵢ, αᵢ) 설정. 항 수보다 큰 i는 0 항으로 채운다."""
        mus = list(self.params.mu)
        alphas = list(self.params.alpha)
        while len(mus) <= i:
            mus.append(0.0)
            alphas.append(2.0)
        mus[i] = mu
        alphas[i] = alpha
        self._update_params(mu=tuple(mus), alpha=tuple(alphas))

    def _principal_kirchhoff(self, point):
        b = self.compute_dev_left_cauchy_green(point)
        lam2, n = np.linalg.eigh(b)
        lam = np.sqrt(np.maximum(lam2, 0.0))
        tau = np.zeros(3)
        for m, a in zip(self.params.mu, self.params.alpha):
            if m == 0.0:
                continue
            tau += (2.0 * m / a) * lam**a
        return tau, n

    def _compute_stress(self, point, Q, base_mat):
        tau, n = self._principal_kirchhoff(point)
        tau_iso = tau - tau.mean()
        return (n @ np.diag(tau_iso) @ n.T) / point.det_f + self._pressure_stress(point)

    def _compute_tangent(self, sigma, point, Q, base_mat):
        return self._numerical_tangent(point, Q, base_mat)
