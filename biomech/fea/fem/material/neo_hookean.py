"""Neo-Hookean hyperelastic material model.

Strain energy density:
ψ = μ/2 * (I₁ - 3) - μ·ln(J) + λ/2 * ln²(J)

where:
- I₁ = tr(C) = tr(FᵀF) is first invariant
- J = det(F) is volume ratio
- μ, λ are Lamé parameters

Cauchy stress:
σ = J⁻¹ · (μ·(B - I) + λ·ln(J)·I)

Spatial tangent:
c = J⁻¹ · (λ·I⊗I + 2(μ - λ·ln(J))·𝕀)

where B = F·Fᵀ is left Cauchy-Green tensor.

Reference:
- Bonet & Wood, "Nonlinear Continuum Mechanics for Finite Element Analysis"
"""

import math
import numpy as np

from .base import FemMaterial
from .params import IsotropicElasticParams, IsotropicElasticProperties
from ..core import tensor


class NeoHookeanMaterial(IsotropicElasticProperties, FemMaterial):
    """Compressible Neo-Hookean hyperelastic material."""

    Params = IsotropicElasticParams

    def __init__(
        self,
        youngs_modulus: float = 500000.0,
        poissons_ratio: float = 0.33,
        visco_behavior=None,
    ):
        """Initialize Neo-Hookean material.

        Args:
            youngs_modulus: Young's modulus E [Pa]
            poissons_ratio: Poisson's ratio ν
            visco_behavior: Optional viscoelastic behavior (cloned)
        """
        super().__init__(
            visco_behavior,
            youngs_modulus=youngs_modulus,
            poissons_ratio=poissons_ratio,
        )

    @classmethod
    def from_moduli(cls, shear: float, bulk: float, visco_behavior=None) -> "NeoHookeanMaterial":
        """Build from shear modulus μ and bulk modulus K.

        E = 9Kμ / (3K + μ),  ν = (3K - 2μ) / (2(3K + μ))
        """
        E = 9.0 * bulk * shear / (3.0 * bulk + shear)
        nu = (3.0 * bulk - 2.0 * shear) / (2.0 * (3.0 * bulk + shear))
        return cls(E, nu, visco_behavior=visco_behavior)

    def _compute_stress(self, point, Q, base_mat):
        lam, mu = self.params.lame()
        J = point.det_f
        B = self.compute_left_cauchy_green(point)
        I = np.eye(3)
        return (mu * (B - I) + lam * math.log(J) * I) / J

    def _compute_tangent(self, sigma, point, Q, base_mat):
        lam, mu = self.params.lame()
        J = point.det_f
        I = np.eye(3)
        c = (lam * tensor.dyad1(I, I) + 2.0 * (mu - lam * math.log(J)) * tensor.identity_4s()) / J
        return tensor.to_voigt_4(c)
