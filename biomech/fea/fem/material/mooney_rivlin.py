"""Mooney-Rivlin 초탄성 재료 모델 (5-파라미터, 비압축 분해).

변형 에너지 밀도:
W̃ = C10·a + C01·b + C11·a·b + C20·a² + C02·b² + U(J)

여기서:
- a = Ĩ₁ - 3, b = Ĩ₂ - 3: 편향 불변량 (b̃ = J^(-2/3)·B 기준)
- C10, C01, C11, C20, C02: Mooney-Rivlin 재료 상수
- U(J): 체적 퍼텐셜 (bulk_modulus, bulk_potential)

특수 케이스:
- C01 = C11 = C20 = C02 = 0 → 비압축 Neo-Hookean (G = 2·C10)
- 연조직, 디스크, 인대 등 생체 조직에 적합

참고문헌:
- Rivlin & Saunders, "Large elastic deformations of isotropic materials" (1951)
- Holzapfel, "Nonlinear Solid Mechanics" (2000), 6.6
"""

from pydantic import model_validator

from .incompressible import BulkPotential, IncompressibleParams
from .invariant import InvariantHyperelastic
from ..validation import validate_mooney_rivlin


class MooneyRivlinParams(IncompressibleParams):
    c10: float = 150000.0
    c01: float = 0.0
    c11: float = 0.0
    c20: float = 0.0
    c02: float = 0.0

    @model_validator(mode="after")
    def _check_mr(self):
        validate_mooney_rivlin(self.c10, self.c01)
        return self


class MooneyRivlinMaterial(InvariantHyperelastic):
    """Mooney-Rivlin 초탄성 재료."""

    Params = MooneyRivlinParams

    def __init__(
        self,
        c10: float = 150000.0,
        c01: float = 0.0,
        c11: float = 0.0,
        c20: float = 0.0,
        c02: float = 0.0,
        bulk_modulus: float = 100000.0,
        bulk_potential: BulkPotential = BulkPotential.QUADRATIC,
        visco_behavior=None,
    ):
        """Mooney-Rivlin 재료 초기화.

        Args:
            c10: 제1 Mooney-Rivlin 상수 [Pa]
            c01: 제2 Mooney-Rivlin 상수 [Pa]
            c11, c20, c02: 고차 상수 [Pa]
            bulk_modulus: 체적 탄성 계수 κ [Pa]
            bulk_potential: 체적 퍼텐셜 종류
            visco_behavior: 점탄성 거동
        """
        super().__init__(
            visco_behavior,
            c10=c10,
            c01=c01,
            c11=c11,
            c20=c20,
            c02=c02,
            bulk_modulus=bulk_modulus,
            bulk_potential=bulk_potential,
        )

    @classmethod
    def from_engineering(
        cls,
        E: float,
        nu: float,
        beta: float = 0.5,
        bulk_potential: BulkPotential = BulkPotential.QUADRATIC,
    ) -> "MooneyRivlinMaterial":
        """공학적 상수(E, ν)에서 Mooney-Rivlin 파라미터 자동 변환.

        Args:
            E: 영 계수 [Pa]
            nu: 푸아송 비
            beta: C10/(C10+C01) 비율 (0~1). beta=1 → Neo-Hookean

        변환:
            μ = E / (2·(1+ν))
            C10 = (μ/2)·β
            C01 = (μ/2)·(1-β)
            K = E / (3·(1-2ν))
        """
        mu = E / (2.0 * (1.0 + nu))
        K = E / (3.0 * (1.0 - 2.0 * nu))
        return cls(
            c10=(mu / 2.0) * beta,
            c01=(mu / 2.0) * (1.0 - beta),
            bulk_modulus=K,
            bulk_potential=bulk_potential,
        )

    @property
    def c10(self) -> float:
        return self.params.c10

    @c10.setter
    def c10(self, value: float):
        self._update_params(c10=value)

    @property
    def c01(self) -> float:
        return self.params.c01

    @c01.setter
    def c01(self, value: float):
        self._update_params(c01=value)

    @property
    def c11(self) -> float:
        return self.params.c11

    @c11.setter
    def c11(self, value: float):
        self._update_params(c11=value)

    @property
    def c20(self) -> float:
        return self.params.c20

    @c20.setter
    def c20(self, value: float):
        self._update_params(c20=value)

    @property
    def c02(self) -> float:
        return self.params.c02

    @c02.setter
    def c02(self, value: float):
        self._update_params(c02=value)

    def _energy_derivatives(self, I1, I2):
        p = self.params
        a = I1 - 3.0
        b = I2 - 3.0
        W1 = p.c10 + p.c11 * b + 2.0 * p.c20 * a
        W2 = p.c01 + p.c11 * a + 2.0 * p.c02 * b
        return W1, W2, 2.0 * p.c20, p.c11, 2.0 * p.c02
