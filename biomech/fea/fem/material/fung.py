"""Fung 직교이방성 초탄성 재료 (비압축 분해).

W̃ = c/2·(e^q - 1) + U(J)
q = c⁻¹·Σₐ [2μₐ·Aₐ:Ē² + Σ_b λₐ_b·(Aₐ:Ē)(A_b:Ē)]

여기서:
- Ē = ½(C̄ - I), C̄ = J^(-2/3)·C: 편향 Green 변형률
- Aₐ = aₐ⊗aₐ: 재료 축 aₐ (이방성 기저 Q의 열)
- μₐ (mu1..3), λₐ_b (l11..l33, l12, l23, l31 대칭), c (cc)

가상 2차 PK 응력:
S̄ = e^q·Σₐ [μₐ·(AₐĒ + ĒAₐ) + (Σ_b λₐ_b·(A_b:Ē))·Aₐ]

σ = (1/J)·dev(F̄ S̄ F̄ᵀ) + p·I,  F̄ = J^(-1/3)·F

접선은 F 섭동 수치 접선을 쓴다.

참고문헌:
- Fung, "Biomechanics: Mechanical Properties of Living Tissues" (1993)
"""

import numpy as np

from pydantic import model_validator

from .incompressible import BulkPotential, IncompressibleMaterialBase, IncompressibleParams
from ..core import tensor
from ..validation import validate_fung

_FIELDS = ("mu1", "mu2", "mu3", "l11", "l22", "l33", "l12", "l23", "l31", "cc")


def _param_property(name: str):
    def fget(self):
        return getattr(self.params, name)

    def fset(self, value):
        self._update_params(**{name: value})

    return property(fget, fset)


class FungParams(IncompressibleParams):
    mu1: float = 1000.0
    mu2: float = 1000.0
    mu3: float = 1000.0
    l11: float = 2000.0
    l22: float = 2000.0
    l33: float = 2000.0
    l12: float = 2000.0
    l23: float = 2000.0
    l31: float = 2000.0
    cc: float = 1500.0

    @model_validator(mode="after")
    def _check_fung(self):
        validate_fung((self.mu1, self.mu2, self.mu3), self.cc)
        return self

    def lambda_matrix(self) -> np.ndarray:
        return np.array([
            [self.l11, self.l12, self.l31],
            [self.l12, self.l22, self.l23],
            [self.l31, self.l23, self.l33],
        ])


class FungMaterial(IncompressibleMaterialBase):
    """Fung 직교이방성 초탄성 재료. 재료 축은 Q의 열로 주어진다."""

    Params = FungParams

    def __init__(
        self,
        mu1: float = 1000.0,
        mu2: float = 1000.0,
        mu3: float = 1000.0,
        l11: float = 2000.0,
        l22: float = 2000.0,
        l33: float = 2000.0,
        l12: float = 2000.0,
        l23: float = 2000.0,
        l31: float = 2000.0,
        cc: float = 1500.0,
        bulk_modulus: float = 100000.0,
        bulk_potential: BulkPotential = BulkPotential.QUADRATIC,
        visco_behavior=None,
    ):
        super().__init__(
            visco_behavior,
            mu1=mu1, mu2=mu2, mu3=mu3,
            l11=l11, l22=l22, l33=l33,
            l12=l12, l23=l23, l31=l31,
            cc=cc,
            bulk_modulus=bulk_modulus,
            bulk_potential=bulk_potential,
        )

    def set_parameter(self, name: str, value: float):
        """mu1..3, l11..l31, cc 중 하나 설정."""
        if name not in _FIELDS:
            raise KeyError(name)
        self._update_params(**{name: value})

    mu1 = _param_property("mu1")
    mu2 = _param_property("mu2")
    mu3 = _param_property("mu3")
    l11 = _param_property("l11")
    l22 = _param_property("l22")
    l33 = _param_property("l33")
    l12 = _param_property("l12")
    l23 = _param_property("l23")
    l31 = _param_property("l31")
    cc = _param_property("cc")

    def _compute_stress(self, point, Q, base_mat):
        p = self.params
        J = point.det_f
        Fb = np.cbrt(J) ** -1 * point.F
        E = 0.5 * (Fb.T @ Fb - np.eye(3))
        E2 = E @ E
        mus = (p.mu1, p.mu2, p.mu3)
        L = p.lambda_matrix()

        axes = [Q[:, a] for a in range(3)]
        A = [np.outer(v, v) for v in axes]
        Ea = np.array([v @ E @ v for v in axes])
        LEa = L @ Ea

        q = sum(2.0 * mus[a] * (axes[a] @ E2 @ axes[a]) for a in range(3)) + Ea @ LEa
        q /= p.cc
        S = np.zeros((3, 3))
        for a in range(3):
            S += mus[a] * (A[a] @ E + E @ A[a]) + LEa[a] * A[a]
        S *= np.exp(q)

        tau_bar = Fb @ S @ Fb.T
        return tensor.dev(tau_bar) / J + self._pressure_stress(point)

    def _compute_tangent(self, sigma, point, Q, base_mat):
        return self._numerical_tangent(point, Q, base_mat)
