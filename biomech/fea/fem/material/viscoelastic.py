"""점탄성 거동: 탄성 응력에 적용되는 이력 의존 이완.

준선형 점탄성(QLV, Prony 급수):

    σ(t) = γ∞·σₑ(t) + Σᵢ hᵢ(t)

이산 재귀 (Simo & Hughes):

    xᵢ = Δt/τᵢ,  eᵢ = exp(-xᵢ),  gᵢ = (1 - eᵢ)/xᵢ   (Δt = 0이면 gᵢ = 1)
    hᵢ⁺ = eᵢ·hᵢ + γᵢ·gᵢ·(σₑ - σₑ,prev)
    D = (γ∞ + Σᵢ γᵢ·gᵢ)·Dₑ

재료는 거동 객체를 단독 소유하고, 이력 변수(QLVState)는 적분점이 단독 소유한다.

참고문헌:
- Fung, "Biomechanics: Mechanical Properties of Living Tissues" (1993)
- Simo & Hughes, "Computational Inelasticity" (1998), Ch. 10
"""

import abc
import copy
import math
import numpy as np
from typing import Optional, Tuple

from pydantic import model_validator

from .params import Parameterized, ParamsModel
from ..validation import validate_prony_series


class MaterialStateObject(abc.ABC):
    """적분점별 재료 상태 (이력 의존 재료용)."""

    @abc.abstractmethod
    def copy(self) -> "MaterialStateObject":
        """독립 복사본."""

    @abc.abstractmethod
    def reset(self):
        """초기 상태로 리셋."""


class ViscoelasticBehavior(Parameterized, abc.ABC):
    """점탄성 거동 추상 클래스."""

    def clone(self) -> "ViscoelasticBehavior":
        """깊은 복사 (파라미터 레코드는 불변이므로 공유, 리스너는 복사하지 않음)."""
        new = copy.copy(self)
        new._listeners = []
        return new

    def __eq__(self, other) -> bool:
        if not isinstance(other, ViscoelasticBehavior):
            return NotImplemented
        return type(self) is type(other) and self.params == other.params

    __hash__ = None

    @abc.abstractmethod
    def create_state(self) -> MaterialStateObject:
        """적분점 상태 객체 생성."""

    @abc.abstractmethod
    def compute_stress(
        self, sigma_e: np.ndarray, state: Optional[MaterialStateObject] = None
    ) -> np.ndarray:
        """탄성 응력 → 점탄성 응력. state가 None이면 이력 없는 순간 응답."""

    @abc.abstractmethod
    def compute_tangent(
        self, D_e: np.ndarray, state: Optional[MaterialStateObject] = None
    ) -> np.ndarray:
        """탄성 접선 → 점탄성 접선."""

    @abc.abstractmethod
    def advance_state(self, state: MaterialStateObject, t0: float, t1: float):
        """시간 스텝 시작: 직전 시행 값을 확정하고 Δt = t1 - t0 설정."""


class QLVParams(ParamsModel):
    """QLV 파라미터."""

    gamma_inf: float = 1.0
    gammas: Tuple[float, ...] = (0.1,)
    relaxation_times: Tuple[float, ...] = (0.1,)

    @model_validator(mode="after")
    def _check(self):
        validate_prony_series(self.gamma_inf, self.gammas, self.relaxation_times)
        return self


class QLVState(MaterialStateObject):
    """QLV 이력 변수.

    Attributes:
        h: 확정된 항별 이력 응력 (n_terms, 3, 3)
        sigma_e: 확정된 탄성 응력
        dt: 현재 스텝 크기
    """

    def __init__(self, n_terms: int):
        self.n_terms = n_terms
        self.reset()

    def reset(self):
        self.h = np.zeros((self.n_terms, 3, 3))
        self.sigma_e = np.zeros((3, 3))
        self.h_trial: Optional[np.ndarray] = None
        self.sigma_e_trial: Optional[np.ndarray] = None
        self.dt = 0.0

    def ensure_terms(self, n_terms: int):
        """항 수가 바뀌었으면 이력을 버리고 재할당."""
        if n_terms != self.n_terms:
            self.n_terms = n_terms
            self.reset()

    def copy(self) -> "QLVState":
        new = QLVState(self.n_terms)
        new.h = self.h.copy()
        new.sigma_e = self.sigma_e.copy()
        new.h_trial = None if self.h_trial is None else self.h_trial.copy()
        new.sigma_e_trial = None if self.sigma_e_trial is None else self.sigma_e_trial.copy()
        new.dt = self.dt
        return new

    def __repr__(self) -> str:
        return f"QLVState(terms={self.n_terms}, dt={self.dt:.4g})"


class QLVBehavior(ViscoelasticBehavior):
    """준선형 점탄성 (Prony 급수, 최대 6항)."""

    Params = QLVParams

    def __init__(
        self,
        gamma_inf: float = 1.0,
        gammas: Tuple[float, ...] = (0.1,),
        relaxation_times: Tuple[float, ...] = (0.1,),
    ):
        """초기화.

        Args:
            gamma_inf: 장기(평형) 계수 γ∞
            gammas: 항별 이완 계수 γᵢ
            relaxation_times: 항별 이완 시간 τᵢ [s]
        """
        self._init_params(
            gamma_inf=gamma_inf,
            gammas=tuple(gammas),
            relaxation_times=tuple(relaxation_times),
        )

    @property
    def gamma_inf(self) -> float:
        return self.params.gamma_inf

    @gamma_inf.setter
    def gamma_inf(self, value: float):
        self._update_params(gamma_inf=value)

    @property
    def gammas(self) -> Tuple[float, ...]:
        return self.params.gammas

    @gammas.setter
    def gammas(self, value):
        self._update_params(gammas=tuple(value))

    @property
    def relaxation_times(self) -> Tuple[float, ...]:
        return self.params.relaxation_times

    @relaxation_times.setter
    def relaxation_times(self, value):
        self._update_params(relaxation_times=tuple(value))

    @property
    def relaxation(self) -> float:
        """첫 항 이완 시간 τ₁ [s]."""
        return self.params.relaxation_times[0]

    @relaxation.setter
    def relaxation(self, value: float):
        taus = (float(value),) + self.params.relaxation_times[1:]
        self._update_params(relaxation_times=taus)

    # ─────────── 재귀 계수 ───────────

    def _factors(self, dt: float):
        decay, gain = [], []
        for tau in self.params.relaxation_times:
            x = dt / tau
            if x <= 1e-12:
                decay.append(1.0)
                gain.append(1.0)
            else:
                decay.append(math.exp(-x))
                gain.append(-math.expm1(-x) / x)
        return np.array(decay), np.array(gain)

    def tangent_scale(self, dt: float = 0.0) -> float:
        """유효 접선 배율 γ∞ + Σ γᵢ·gᵢ(Δt)."""
        _, gain = self._factors(dt)
        return float(self.params.gamma_inf + np.dot(self.params.gammas, gain))

    def create_state(self) -> QLVState:
        return QLVState(len(self.params.gammas))

    def compute_stress(self, sigma_e, state=None):
        if state is None:
            return self.tangent_scale(0.0) * sigma_e
        state.ensure_terms(len(self.params.gammas))
        decay, gain = self._factors(state.dt)
        weights = np.asarray(self.params.gammas) * gain
        dsigma = sigma_e - state.sigma_e
        h_trial = decay[:, None, None] * state.h + weights[:, None, None] * dsigma
        state.h_trial = h_trial
        state.sigma_e_trial = np.array(sigma_e, dtype=np.float64)
        return self.params.gamma_inf * sigma_e + h_trial.sum(axis=0)

    def compute_tangent(self, D_e, state=None):
        dt = 0.0 if state is None else state.dt
        return self.tangent_scale(dt) * D_e

    def advance_state(self, state: QLVState, t0: float, t1: float):
        state.ensure_terms(len(self.params.gammas))
        if state.h_trial is not None:
            state.h = state.h_trial
            state.sigma_e = state.sigma_e_trial
            state.h_trial = None
            state.sigma_e_trial = None
        state.dt = float(t1 - t0)

    def __repr__(self) -> str:
        return (
            f"QLVBehavior(γ∞={self.params.gamma_inf:.3g}, γ={self.params.gammas}, "
            f"τ={self.params.relaxation_times})"
        )
