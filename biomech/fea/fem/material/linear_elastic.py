"""Linear elastic material model.

Implements small strain isotropic linear elasticity:
σ = λ·tr(ε)·I + 2μ·ε

where:
- ε = sym(F) - I is the small strain tensor
- λ, μ are Lamé parameters

Corotated form (default): the rotation R of F is removed first,
ε = sym(RᵀF) - I and σ = R·(λ·tr(ε)·I + 2μ·ε)·Rᵀ. R comes from the
deformed point when the element supplies it, otherwise from the polar
decomposition of F. The isotropic tangent is rotation invariant, so D
is the same constant tensor in both forms and is cached.
"""

import numpy as np
from typing import Optional

from .base import FemMaterial
from .params import IsotropicElasticParams, IsotropicElasticProperties
from ..core import tensor


class LinearParams(IsotropicElasticParams):
    corotated: bool = True


class LinearMaterial(IsotropicElasticProperties, FemMaterial):
    """Isotropic linear elastic material."""

    Params = LinearParams

    def __init__(
        self,
        youngs_modulus: float = 500000.0,
        poissons_ratio: float = 0.33,
        corotated: bool = True,
        visco_behavior=None,
    ):
        """Initialize linear elastic material.

        Args:
            youngs_modulus: Young's modulus E [Pa]
            poissons_ratio: Poisson's ratio ν
            corotated: Remove the rotation of F before evaluation
            visco_behavior: Optional viscoelastic behavior (cloned)
        """
        super().__init__(
            visco_behavior,
            youngs_modulus=youngs_modulus,
            poissons_ratio=poissons_ratio,
            corotated=corotated,
        )
        self._tangent: Optional[np.ndarray] = None

    @property
    def corotated(self) -> bool:
        return self.params.corotated

    @corotated.setter
    def corotated(self, value: bool):
        self._update_params(corotated=bool(value))

    def is_invertible(self) -> bool:
        return True

    def is_linear(self) -> bool:
        return True

    def is_corotated(self) -> bool:
        return self.params.corotated

    def _on_params_changed(self):
        self._tangent = None

    def get_elasticity_tensor(self) -> np.ndarray:
        if self._tangent is None:
            lam, mu = self.params.lame()
            self._tangent = tensor.isotropic_tangent(lam, mu)
        return self._tangent.copy()

    def _compute_stress(self, point, Q, base_mat):
        lam, mu = self.params.lame()
        F = point.F
        if self.params.corotated:
            R = point.R if point.R is not None else tensor.polar_rotation(F)
            eps = tensor.symmetrize(R.T @ F) - np.eye(3)
            sig = lam * np.trace(eps) * np.eye(3) + 2.0 * mu * eps
            return R @ sig @ R.T
        eps = tensor.symmetrize(F) - np.eye(3)
        return lam * np.trace(eps) * np.eye(3) + 2.0 * mu * eps

    def _compute_tangent(self, sigma, point, Q, base_mat):
        return self.get_elasticity_tensor()
