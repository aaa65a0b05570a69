"""3차 편향 초탄성 재료 (Yeoh 형태).

W̃ = G10·a + G20·a² + G30·a³ + U(J),  a = Ĩ₁ - 3
"""

from .incompressible import BulkPotential, IncompressibleParams
from .invariant import InvariantHyperelastic


class CubicHyperelasticParams(IncompressibleParams):
    g10: float = 150000.0
    g20: float = 0.0
    g30: float = 0.0


class CubicHyperelastic(InvariantHyperelastic):
    """Ĩ₁ 3차 다항식 초탄성 재료."""

    Params = CubicHyperelasticParams

    def __init__(
        self,
        g10: float = 150000.0,
        g20: float = 0.0,
        g30: float = 0.0,
        bulk_modulus: float = 100000.0,
        bulk_potential: BulkPotential = BulkPotential.QUADRATIC,
        visco_behavior=None,
    ):
        super().__init__(
            visco_behavior,
            g10=g10,
            g20=g20,
            g30=g30,
            bulk_modulus=bulk_modulus,
            bulk_potential=bulk_potential,
        )

    @property
    def g10(self) -> float:
        return self.params.g10

    @g10.setter
    def g10(self, value: float):
        self._update_params(g10=value)

    @property
    def g20(self) -> float:
        return self.params.g20

    @g20.setter
    def g20(self, value: float):
        self._update_params(g20=value)

    @property
    def g30(self) -> float:
        return self.params.g30

    @g30.setter
    def g30(self, value: float):
        self._update_params(g30=value)

    def _energy_derivatives(self, I1, I2):
        p = self.params
        a = I1 - 3.0
        W1 = p.g10 + 2.0 * p.g20 * a + 3.0 * p.g30 * a * a
        W11 = 2.0 * p.g20 + 6.0 * p.g30 * a
        return W1, 0.0, W11, 0.0, 0.0
