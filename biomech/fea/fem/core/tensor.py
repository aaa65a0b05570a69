"""2차/4차 텐서 대수와 Voigt 변환.

Voigt 쌍 순서 (전 재료 공통):
    0 → 11, 1 → 22, 2 → 33, 3 → 12, 4 → 23, 5 → 13

4차 텐서는 (3, 3, 3, 3) 배열로 다루고 마지막에 6×6으로 압축한다.
전단 성분은 공학 전단 변형률 규약을 따르므로 D[3, 3] = c₁₂₁₂ 이다.
"""

import numpy as np

from ....utils.transform import orthonormalize

VOIGT_PAIRS = ((0, 0), (1, 1), (2, 2), (0, 1), (1, 2), (0, 2))

IDENTITY = np.eye(3)


def symmetrize(A: np.ndarray) -> np.ndarray:
    """대칭부 ½(A + Aᵀ)."""
    return 0.5 * (A + A.T)


def dev(A: np.ndarray) -> np.ndarray:
    """편향부 A - ⅓ tr(A) I."""
    return A - (np.trace(A) / 3.0) * IDENTITY


def dyad1(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    """(A⊗B)_ijkl = A_ij B_kl."""
    return np.einsum("ij,kl->ijkl", A, B)


def dyad4s(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    """대칭화된 (A⊙B)_ijkl = ¼(A_ik B_jl + A_il B_jk + B_ik A_jl + B_il A_jk)."""
    t = np.einsum("ik,jl->ijkl", A, B) + np.einsum("il,jk->ijkl", A, B)
    return 0.25 * (t + np.einsum("ik,jl->ijkl", B, A) + np.einsum("il,jk->ijkl", B, A))


def identity_4s() -> np.ndarray:
    """대칭 4차 항등 텐서 𝕀_ijkl = ½(δ_ik δ_jl + δ_il δ_jk)."""
    return dyad4s(IDENTITY, IDENTITY)


def deviatoric_projector() -> np.ndarray:
    """공간 편향 투영 ℙ = 𝕀 - ⅓ I⊗I."""
    return identity_4s() - dyad1(IDENTITY, IDENTITY) / 3.0


def ddot_44(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    """4차-4차 이중 축약 (A:B)_ijkl = A_ijmn B_mnkl."""
    return np.einsum("ijmn,mnkl->ijkl", A, B)


def ddot_42(A: np.ndarray, X: np.ndarray) -> np.ndarray:
    """4차-2차 이중 축약 (A:X)_ij = A_ijkl X_kl."""
    return np.einsum("ijkl,kl->ij", A, X)


def push_forward_4(C: np.ndarray, F: np.ndarray, J: float) -> np.ndarray:
    """물질 탄성 텐서 → 공간 탄성 텐서.

    c_ijkl = (1/J) F_iI F_jJ F_kK F_lL C_IJKL
    """
    return np.einsum("iI,jJ,kK,lL,IJKL->ijkl", F, F, F, F, C) / J


def rotate_4(C: np.ndarray, R: np.ndarray) -> np.ndarray:
    """4차 텐서 회전 (push_forward_4에서 J = 1)."""
    return np.einsum("iI,jJ,kK,lL,IJKL->ijkl", R, R, R, R, C)


def to_voigt_4(c: np.ndarray) -> np.ndarray:
    """(3,3,3,3) 소대칭 텐서 → 6×6 Voigt 행렬."""
    D = np.empty((6, 6))
    for a, (i, j) in enumerate(VOIGT_PAIRS):
        for b, (k, l) in enumerate(VOIGT_PAIRS):
            D[a, b] = c[i, j, k, l]
    return D


def from_voigt_4(D: np.ndarray) -> np.ndarray:
    """6×6 Voigt 행렬 → (3,3,3,3) 소대칭 텐서."""
    c = np.empty((3, 3, 3, 3))
    for a, (i, j) in enumerate(VOIGT_PAIRS):
        for b, (k, l) in enumerate(VOIGT_PAIRS):
            v = D[a, b]
            c[i, j, k, l] = v
            c[j, i, k, l] = v
            c[i, j, l, k] = v
            c[j, i, l, k] = v
    return c


def to_voigt_2(A: np.ndarray) -> np.ndarray:
    """대칭 3×3 → Voigt 6-벡터 (11, 22, 33, 12, 23, 13)."""
    return np.array([A[i, j] for i, j in VOIGT_PAIRS])


def voigt_unit(a: int) -> np.ndarray:
    """Voigt 성분 a에 해당하는 대칭 단위 텐서 G.

    c:G 가 Voigt 열 a를 돌려주도록 전단 성분은 ½(e_k⊗e_l + e_l⊗e_k).
    """
    k, l = VOIGT_PAIRS[a]
    G = np.zeros((3, 3))
    if k == l:
        G[k, k] = 1.0
    else:
        G[k, l] = G[l, k] = 0.5
    return G


def isotropic_tangent(lam: float, mu: float) -> np.ndarray:
    """등방 선형 탄성 6×6 텐서 (Voigt)."""
    C = np.zeros((6, 6))
    C[0, 0] = C[1, 1] = C[2, 2] = lam + 2 * mu
    C[0, 1] = C[0, 2] = C[1, 2] = lam
    C[1, 0] = C[2, 0] = C[2, 1] = lam
    C[3, 3] = C[4, 4] = C[5, 5] = mu
    return C


def lame_parameters(E: float, nu: float):
    """(E, ν) → (λ, μ)."""
    mu = E / (2.0 * (1.0 + nu))
    lam = E * nu / ((1.0 + nu) * (1.0 - 2.0 * nu))
    return lam, mu


def pressure_tangent(p: float) -> np.ndarray:
    """고정 압력 p의 공간 접선 p(I⊗I - 2𝕀), 4차 배열."""
    return p * (dyad1(IDENTITY, IDENTITY) - 2.0 * identity_4s())


def polar_rotation(F: np.ndarray) -> np.ndarray:
    """F의 극분해 회전부 (det F ≤ 0이어도 고유 회전 반환)."""
    return orthonormalize(F)
