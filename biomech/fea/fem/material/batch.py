"""Taichi 배치 응력 평가.

다수의 적분점 변형 구배 F에 대해 Cauchy 응력을 한 번의 커널 실행으로 계산한다.
지원 재료:
- LinearMaterial (corotated=False): σ = λ·tr(ε)·I + 2μ·ε, ε = sym(F) - I
- StVenantKirchhoffMaterial: σ = J⁻¹·F (λ·tr(E)·I + 2μ·E) Fᵀ
- NeoHookeanMaterial: σ = J⁻¹·(μ·(B - I) + λ·ln(J)·I)
- IncompNeoHookeanMaterial, MooneyRivlinMaterial: σ = J⁻¹·dev(τ̄) + p·I

그 외 재료는 compute_stress 점별 루프로 처리한다.
비가역 재료의 J ≤ 0 점은 점별 경로와 같이 σ = 0 이다.
"""

import logging
import numpy as np
import taichi as ti
from typing import Optional

from .base import FemMaterial
from .incomp_neo_hookean import IncompNeoHookeanMaterial
from .linear_elastic import LinearMaterial
from .mooney_rivlin import MooneyRivlinMaterial
from .neo_hookean import NeoHookeanMaterial
from .st_venant_kirchhoff import StVenantKirchhoffMaterial
from ..core.deformed_point import DeformedPoint
from ..validation import FEAValidationError
from ... import runtime

logger = logging.getLogger(__name__)

KIND_LINEAR = 0
KIND_SVK = 1
KIND_NEO_HOOKEAN = 2
KIND_INVARIANT = 3


def kernel_kind(material: FemMaterial) -> Optional[int]:
    """재료에 맞는 커널 종류. 지원하지 않으면 None."""
    if type(material) is LinearMaterial and not material.is_corotated():
        return KIND_LINEAR
    if type(material) is StVenantKirchhoffMaterial:
        return KIND_SVK
    if type(material) is NeoHookeanMaterial:
        return KIND_NEO_HOOKEAN
    if type(material) in (IncompNeoHookeanMaterial, MooneyRivlinMaterial):
        return KIND_INVARIANT
    return None


@ti.data_oriented
class BatchStressEvaluator:
    """재료 하나에 대한 배치 Cauchy 응력 평가기."""

    def __init__(self, material: FemMaterial):
        """초기화.

        Args:
            material: 평가할 재료 (참조 유지, 파라미터 변경은 다음 평가에 반영)
        """
        runtime.init()
        self.material = material
        self._capacity = 0
        self._F = None
        self._p = None
        self._sigma = None

    @property
    def uses_kernel(self) -> bool:
        return kernel_kind(self.material) is not None

    def evaluate(self, F: np.ndarray, pressures: Optional[np.ndarray] = None) -> np.ndarray:
        """Cauchy 응력 계산.

        Args:
            F: (n, 3, 3) 변형 구배
            pressures: (n,) 평균 압력. None이면 0

        Returns:
            (n, 3, 3) 대칭 Cauchy 응력
        """
        F = np.asarray(F, dtype=np.float64)
        if F.ndim != 3 or F.shape[1:] != (3, 3):
            raise FEAValidationError(
                f"변형 구배 배열 형상이 {F.shape}입니다. (n, 3, 3)이어야 합니다.",
                parameter="F",
            )
        n = F.shape[0]
        if pressures is None:
            p = np.zeros(n)
        else:
            p = np.asarray(pressures, dtype=np.float64).reshape(-1)
            if p.size != n:
                raise FEAValidationError(
                    f"압력 개수({p.size})가 점 개수({n})와 다릅니다.",
                    parameter="pressures",
                )
        if n == 0:
            return np.zeros((0, 3, 3))

        kind = kernel_kind(self.material)
        if kind is None:
            logger.debug(f"{type(self.material).__name__}: 커널 미지원, 점별 평가 ({n}점)")
            return self._evaluate_pointwise(F, p)

        self._ensure_capacity(n)
        self._F.from_numpy(_pad(F, self._capacity))
        self._p.from_numpy(_pad(p, self._capacity))
        self._stress_kernel(self._F, self._p, self._sigma, n, kind, *self._coefficients(kind))
        sigma = self._sigma.to_numpy()[:n].astype(np.float64)

        bad = ~np.all(np.isfinite(sigma), axis=(1, 2))
        if np.any(bad):
            logger.warning(f"{type(self.material).__name__}: 비유한 응력 {int(bad.sum())}점, 0으로 대체")
            sigma[bad] = 0.0
        return 0.5 * (sigma + np.transpose(sigma, (0, 2, 1)))

    def _evaluate_pointwise(self, F: np.ndarray, p: np.ndarray) -> np.ndarray:
        out = np.zeros_like(F)
        for i in range(F.shape[0]):
            point = DeformedPoint.from_gradient(F[i], pressure=p[i])
            out[i] = self.material.compute_stress(point)
        return out

    def _coefficients(self, kind: int):
        """커널 스칼라 인자 (λ, μ, c10, c01, c11, c20, c02)."""
        mat = self.material
        if kind in (KIND_LINEAR, KIND_SVK, KIND_NEO_HOOKEAN):
            lam, mu = mat.params.lame()
            return lam, mu, 0.0, 0.0, 0.0, 0.0, 0.0
        if isinstance(mat, IncompNeoHookeanMaterial):
            return 0.0, 0.0, 0.5 * mat.shear_modulus, 0.0, 0.0, 0.0, 0.0
        prm = mat.params
        return 0.0, 0.0, prm.c10, prm.c01, prm.c11, prm.c20, prm.c02

    def _ensure_capacity(self, n: int):
        if n <= self._capacity:
            return
        dtype = runtime.get_ti_dtype()
        self._F = ti.Matrix.field(3, 3, dtype=dtype, shape=n)
        self._p = ti.field(dtype=dtype, shape=n)
        self._sigma = ti.Matrix.field(3, 3, dtype=dtype, shape=n)
        self._capacity = n

    @ti.kernel
    def _stress_kernel(
        self,
        F: ti.template(),
        p: ti.template(),
        sigma: ti.template(),
        n: int,
        kind: int,
        lam: float,
        mu: float,
        c10: float,
        c01: float,
        c11: float,
        c20: float,
        c02: float,
    ):
        for i in range(n):
            Fi = F[i]
            J = Fi.determinant()
            I = ti.Matrix.identity(float, 3)
            s = ti.Matrix.zero(float, 3, 3)

            if kind == KIND_LINEAR:
                eps = 0.5 * (Fi + Fi.transpose()) - I
                s = lam * eps.trace() * I + 2.0 * mu * eps
            elif J > 0.0:
                if kind == KIND_SVK:
                    E = 0.5 * (Fi.transpose() @ Fi - I)
                    S = lam * E.trace() * I + 2.0 * mu * E
                    s = (Fi @ S @ Fi.transpose()) / J
                elif kind == KIND_NEO_HOOKEAN:
                    B = Fi @ Fi.transpose()
                    s = (mu * (B - I) + lam * ti.log(J) * I) / J
                else:
                    b = ti.pow(J, -2.0 / 3.0) * (Fi @ Fi.transpose())
                    b2 = b @ b
                    I1 = b.trace()
                    I2 = 0.5 * (I1 * I1 - b2.trace())
                    a1 = I1 - 3.0
                    a2 = I2 - 3.0
                    W1 = c10 + c11 * a2 + 2.0 * c20 * a1
                    W2 = c01 + c11 * a1 + 2.0 * c02 * a2
                    tau = 2.0 * ((W1 + I1 * W2) * b - W2 * b2)
                    s = (tau - (tau.trace() / 3.0) * I) / J + p[i] * I

            sigma[i] = s


def _pad(a: np.ndarray, n: int) -> np.ndarray:
    if a.shape[0] == n:
        return a
    out = np.zeros((n,) + a.shape[1:], dtype=a.dtype)
    out[: a.shape[0]] = a
    return out
