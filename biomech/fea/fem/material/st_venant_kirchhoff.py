"""St. Venant-Kirchhoff hyperelastic material model.

Strain energy density:
ψ = λ/2 * (tr E)² + μ * E:E

where:
- E = ½(C - I) is the Green-Lagrange strain
- λ, μ are Lamé parameters

Second Piola-Kirchhoff stress:
S = λ·tr(E)·I + 2μ·E

The material tangent ∂S/∂E is the constant isotropic tensor, so the
spatial tangent is its push-forward c = J⁻¹·F F ℂ Fᵀ Fᵀ.
"""

import numpy as np

from .base import FemMaterial
from .params import IsotropicElasticParams, IsotropicElasticProperties
from ..core import tensor


class StVenantKirchhoffMaterial(IsotropicElasticProperties, FemMaterial):
    """Isotropic St. Venant-Kirchhoff material."""

    Params = IsotropicElasticParams

    def __init__(
        self,
        youngs_modulus: float = 500000.0,
        poissons_ratio: float = 0.33,
        visco_behavior=None,
    ):
        """Initialize St. Venant-Kirchhoff material.

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

    def _compute_stress(self, point, Q, base_mat):
        lam, mu = self.params.lame()
        F = point.F
        E = 0.5 * (F.T @ F - np.eye(3))
        S = lam * np.trace(E) * np.eye(3) + 2.0 * mu * E
        return (F @ S @ F.T) / point.det_f

    def _compute_tangent(self, sigma, point, Q, base_mat):
        lam, mu = self.params.lame()
        C = tensor.from_voigt_4(tensor.isotropic_tangent(lam, mu))
        return tensor.to_voigt_4(tensor.push_forward_4(C, point.F, point.det_f))
