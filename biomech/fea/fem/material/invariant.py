"""편향 불변량 기반 초탄성 재료 공통 구현.

비압축 분해 W = W̃(Ĩ₁, Ĩ₂) + U(J), 여기서 b̃ = J^(-2/3)·B.

가상 Kirchhoff 응력:
    τ̄ = 2·[(W₁ + Ĩ₁·W₂)·b̃ - W₂·b̃²],   τ_iso = dev(τ̄)

공간 접선 (Holzapfel, Nonlinear Solid Mechanics, 6.6):
    J·c_iso = ℙ:(J·c̄):ℙ + ⅔·tr(τ̄)·ℙ - ⅔·(τ_iso⊗I + I⊗τ_iso)
    J·c̄ = 4·[(W₂ + W₁₁ + 2Ĩ₁W₁₂ + Ĩ₁²W₂₂)·b̃⊗b̃
             - (W₁₂ + Ĩ₁W₂₂)·(b̃⊗b̃² + b̃²⊗b̃)
             + W₂₂·b̃²⊗b̃² - W₂·b̃⊙b̃]

하위 클래스는 에너지 도함수 (W₁, W₂, W₁₁, W₁₂, W₂₂)만 제공한다.
"""

import abc
import numpy as np
from typing import Tuple

from .incompressible import IncompressibleMaterialBase
from ..core import tensor


class InvariantHyperelastic(IncompressibleMaterialBase):
    """Ĩ₁, Ĩ₂ 함수로 주어지는 비압축 초탄성 재료."""

    @abc.abstractmethod
    def _energy_derivatives(
        self, I1: float, I2: float
    ) -> Tuple[float, float, float, float, float]:
        """(W₁, W₂, W₁₁, W₁₂, W₂₂) 반환."""

    def _kinematics(self, point):
        b = self.compute_dev_left_cauchy_green(point)
        b2 = b @ b
        I1 = np.trace(b)
        I2 = 0.5 * (I1 * I1 - np.trace(b2))
        return b, b2, I1, I2

    def _compute_stress(self, point, Q, base_mat):
        b, b2, I1, I2 = self._kinematics(point)
        W1, W2, _, _, _ = self._energy_derivatives(I1, I2)
        tau_bar = 2.0 * ((W1 + I1 * W2) * b - W2 * b2)
        return tensor.dev(tau_bar) / point.det_f + self._pressure_stress(point)

    def _compute_tangent(self, sigma, point, Q, base_mat):
        J = point.det_f
        b, b2, I1, I2 = self._kinematics(point)
        W1, W2, W11, W12, W22 = self._energy_derivatives(I1, I2)
        I = np.eye(3)

        tau_bar = 2.0 * ((W1 + I1 * W2) * b - W2 * b2)
        tau_iso = tensor.dev(tau_bar)

        Jc_bar = 4.0 * (
            (W2 + W11 + 2.0 * I1 * W12 + I1 * I1 * W22) * tensor.dyad1(b, b)
            - (W12 + I1 * W22) * (tensor.dyad1(b, b2) + tensor.dyad1(b2, b))
            + W22 * tensor.dyad1(b2, b2)
            - W2 * tensor.dyad4s(b, b)
        )
        P = tensor.deviatoric_projector()
        Jc = (
            tensor.ddot_44(tensor.ddot_44(P, Jc_bar), P)
            + (2.0 / 3.0) * np.trace(tau_bar) * P
            - (2.0 / 3.0) * (tensor.dyad1(tau_iso, I) + tensor.dyad1(I, tau_iso))
        )
        c = Jc / J + self._pressure_tangent_4(point)
        return tensor.to_voigt_4(c)
