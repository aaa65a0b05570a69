"""FEM 입력 검증 유틸리티.

재료 상수, 적분점 데이터, 관절 파라미터의 유효성을 검사한다.
구성 평가(응력/접선) 자체는 예외를 던지지 않으며, 검증은 설정 시점에만 수행한다.
"""

import logging
import numpy as np
from typing import Sequence

# 모듈 전용 로거
logger = logging.getLogger(__name__)


# ───────────────── 커스텀 예외 ─────────────────


class FEAValidationError(ValueError):
    """FEA 입력 검증 오류.

    Attributes:
        parameter: 문제가 된 매개변수 이름
        value: 전달된 값
        suggestion: 수정 제안
    """

    def __init__(
        self,
        message: str,
        parameter: str = "",
        value=None,
        suggestion: str = "",
    ):
        self.parameter = parameter
        self.value = value
        self.suggestion = suggestion
        full_msg = f"[FEA 검증 오류] {message}"
        if suggestion:
            full_msg += f" → 제안: {suggestion}"
        super().__init__(full_msg)


class MaterialParameterError(FEAValidationError):
    """재료 파라미터 설정 거부 (이전 값 유지)."""


class InvalidDeformationError(RuntimeError):
    """반전된 변형 (J ≤ 0): 비가역 재료에서 요소가 스텝을 거부할 때 사용.

    Attributes:
        det_f: 변형 구배 행렬식
        element_number: 요소 번호 (-1이면 미지정)
    """

    def __init__(self, message: str, det_f: float = 0.0, element_number: int = -1):
        self.det_f = det_f
        self.element_number = element_number
        super().__init__(f"[FEA 반전 변형] {message}")


# ───────────────── 재료 상수 검증 ─────────────────


def validate_elastic_constants(
    E: float, nu: float, name: str = "재료"
):
    """등방 탄성 상수 검증.

    Args:
        E: 영 계수 [Pa]
        nu: 푸아송 비
        name: 재료 이름 (오류 메시지용)

    Raises:
        FEAValidationError: 무효한 값
    """
    if E <= 0:
        raise FEAValidationError(
            f"{name}의 영 계수(E)가 {E}입니다. 양수여야 합니다.",
            parameter="youngs_modulus",
            value=E,
            suggestion="피질골: 10-20 GPa, 연골: 1-10 MPa, 연조직: 1-100 kPa",
        )
    if nu <= -1.0 or nu >= 0.5:
        raise FEAValidationError(
            f"{name}의 푸아송 비(ν)가 {nu}입니다. -1.0 < ν < 0.5 범위여야 합니다.",
            parameter="poissons_ratio",
            value=nu,
            suggestion="거의 비압축성: ν≈0.49 또는 비압축성 재료 사용",
        )


def validate_shear_modulus(G: float, name: str = "재료"):
    """전단 계수 검증 (0 허용: 편향 응답 없음)."""
    if G < 0:
        raise FEAValidationError(
            f"{name}의 전단 계수(G)가 {G}입니다. 0 이상이어야 합니다.",
            parameter="shear_modulus",
            value=G,
        )


def validate_bulk_modulus(kappa: float, name: str = "재료"):
    """체적 탄성 계수 검증."""
    if kappa < 0:
        raise FEAValidationError(
            f"{name}의 체적 탄성 계수(κ)가 {kappa}입니다. 0 이상이어야 합니다.",
            parameter="bulk_modulus",
            value=kappa,
            suggestion="연조직: κ ≈ 10-1000 × G",
        )


def validate_mooney_rivlin(c10: float, c01: float):
    """Mooney-Rivlin 상수 검증."""
    if c10 + c01 < 0:
        raise FEAValidationError(
            f"C10({c10}) + C01({c01}) < 0: 초기 전단 계수(μ=2(C10+C01))가 음수입니다.",
            parameter="c10+c01",
            value=c10 + c01,
            suggestion="C10, C01 모두 0 이상으로 설정 권장",
        )


def validate_ogden(mu: Sequence[float], alpha: Sequence[float]):
    """Ogden 파라미터 검증 (다항)."""
    if len(mu) != len(alpha):
        raise FEAValidationError(
            f"μ 항 수({len(mu)})와 α 항 수({len(alpha)})가 다릅니다.",
            parameter="mu,alpha",
        )
    if not 1 <= len(mu) <= 6:
        raise FEAValidationError(
            f"Ogden 항 수가 {len(mu)}입니다. 1~6 항이어야 합니다.",
            parameter="mu",
            value=len(mu),
        )
    for i, (m, a) in enumerate(zip(mu, alpha)):
        if m != 0 and a == 0:
            raise FEAValidationError(
                f"α{i + 1} = 0: Ogden 지수가 0이면 에너지 함수가 정의되지 않습니다.",
                parameter=f"alpha[{i}]",
                value=a,
                suggestion="α=2 → Neo-Hookean, α<2 → 연조직, α>2 → 경질 재료",
            )
    # 초기 전단 계수 μ₀ = Σμᵢ (2μᵢ/αᵢ² 정규화)
    mu0 = float(sum(m for m, a in zip(mu, alpha) if a != 0))
    if mu0 < 0:
        raise FEAValidationError(
            f"초기 전단 계수 Σμᵢ({mu0})가 음수입니다.",
            parameter="mu",
            value=mu0,
        )


def validate_fung(mu: Sequence[float], cc: float):
    """Fung 파라미터 검증."""
    if cc <= 0:
        raise FEAValidationError(
            f"Fung 계수 CC({cc})가 양수가 아닙니다.",
            parameter="cc",
            value=cc,
        )
    for i, m in enumerate(mu):
        if m < 0:
            raise FEAValidationError(
                f"Fung 전단 계수 mu{i + 1}({m})가 음수입니다.",
                parameter=f"mu{i + 1}",
                value=m,
            )


def validate_prony_series(
    gamma_inf: float,
    gammas: Sequence[float],
    relaxation_times: Sequence[float],
):
    """점탄성 Prony 급수 검증."""
    if gamma_inf < 0:
        raise FEAValidationError(
            f"장기 계수 γ∞({gamma_inf})가 음수입니다.",
            parameter="gamma_inf",
            value=gamma_inf,
        )
    if len(gammas) != len(relaxation_times):
        raise FEAValidationError(
            f"γ 항 수({len(gammas)})와 이완 시간 수({len(relaxation_times)})가 다릅니다.",
            parameter="gammas,relaxation_times",
        )
    if len(gammas) > 6:
        raise FEAValidationError(
            f"Prony 항 수가 {len(gammas)}입니다. 최대 6항까지 지원합니다.",
            parameter="gammas",
            value=len(gammas),
        )
    for i, (g, tau) in enumerate(zip(gammas, relaxation_times)):
        if g < 0:
            raise FEAValidationError(
                f"γ{i + 1}({g})가 음수입니다.",
                parameter=f"gammas[{i}]",
                value=g,
            )
        if tau <= 0:
            raise FEAValidationError(
                f"이완 시간 τ{i + 1}({tau})가 양수가 아닙니다.",
                parameter=f"relaxation_times[{i}]",
                value=tau,
                suggestion="연조직: τ ≈ 0.01-100 s",
            )


# ───────────────── 적분점 / 관절 검증 ─────────────────


def validate_node_weights(
    node_numbers: Sequence[int],
    node_weights: Sequence[float],
    tol: float = 1e-8,
):
    """적분점 절점 번호/가중치 검증.

    Args:
        node_numbers: 절점 번호
        node_weights: 형상함수 가중치 (합 = 1)
        tol: 합 허용 오차
    """
    if len(node_numbers) != len(node_weights):
        raise FEAValidationError(
            f"절점 번호 수({len(node_numbers)})와 가중치 수({len(node_weights)})가 다릅니다.",
            parameter="node_weights",
        )
    if len(node_weights) > 0:
        total = float(np.sum(node_weights))
        if abs(total - 1.0) > tol:
            raise FEAValidationError(
                f"절점 가중치 합이 {total:.12g}입니다. 1이어야 합니다.",
                parameter="node_weights",
                value=total,
            )


def validate_nonnegative_vector(
    values, size: int, name: str = "벡터"
) -> np.ndarray:
    """고정 길이 비음수 벡터 검증 (관절 compliance/damping).

    Returns:
        float64 복사본
    """
    arr = np.array(values, dtype=np.float64).reshape(-1)
    if arr.size != size:
        raise FEAValidationError(
            f"{name} 길이가 {arr.size}입니다. {size}이어야 합니다.",
            parameter=name,
            value=arr.size,
        )
    if np.any(arr < 0) or not np.all(np.isfinite(arr)):
        raise FEAValidationError(
            f"{name}에 음수 또는 비유한 값이 있습니다: {arr}",
            parameter=name,
        )
    return arr
