"""응력이 없는 재료 (비활성 요소, 자리표시용)."""

import numpy as np

from .base import FemMaterial
from .params import ParamsModel


class NullParams(ParamsModel):
    pass


class NullMaterial(FemMaterial):
    """σ = 0, D = 0."""

    Params = NullParams

    def __init__(self, visco_behavior=None):
        super().__init__(visco_behavior)

    def is_invertible(self) -> bool:
        return True

    def is_linear(self) -> bool:
        return True

    def _compute_stress(self, point, Q, base_mat):
        return np.zeros((3, 3))

    def _compute_tangent(self, sigma, point, Q, base_mat):
        return np.zeros((6, 6))
