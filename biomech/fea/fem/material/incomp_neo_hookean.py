"""비압축 Neo-Hookean 재료.

W̃ = G/2·(Ĩ₁ - 3) + U(J)

편향 응력 σ_iso = (G/J)·dev(b̃), 체적 응답은 평균 압력으로 처리한다.
"""

from pydantic import model_validator

from .incompressible import BulkPotential, IncompressibleParams
from .invariant import InvariantHyperelastic
from ..validation import validate_shear_modulus


class IncompNeoHookeanParams(IncompressibleParams):
    shear_modulus: float = 150000.0

    @model_validator(mode="after")
    def _check_shear(self):
        validate_shear_modulus(self.shear_modulus, "IncompNeoHookeanMaterial")
        return self


class IncompNeoHookeanMaterial(InvariantHyperelastic):
    """비압축 Neo-Hookean 초탄성 재료."""

    Params = IncompNeoHookeanParams

    def __init__(
        self,
        shear_modulus: float = 150000.0,
        bulk_modulus: float = 100000.0,
        bulk_potential: BulkPotential = BulkPotential.QUADRATIC,
        visco_behavior=None,
    ):
        super().__init__(
            visco_behavior,
            shear_modulus=shear_modulus,
            bulk_modulus=bulk_modulus,
            bulk_potential=bulk_potential,
        )

    @property
    def shear_modulus(self) -> float:
        return self.params.shear_modulus

    @shear_modulus.setter
    def shear_modulus(self, value: float):
        self._update_params(shear_modulus=value)

    def _energy_derivatives(self, I1, I2):
        return 0.5 * self.params.shear_modulus, 0.0, 0.0, 0.0, 0.0
