"""준선형 점탄성(QLV) 거동 테스트."""

import math

import pytest
import numpy as np

from biomech.fea.fem.core import DeformedPoint
from biomech.fea.fem.material import NeoHookeanMaterial, QLVBehavior, QLVState
from biomech.fea.fem.validation import MaterialParameterError

F_STRETCH = np.diag([1.05, 0.98, 0.98])


class TestQLVRecursion:
    """Prony 급수 재귀."""

    def test_instantaneous_without_state(self):
        """state 없음 → (γ∞ + Σγ)·σₑ."""
        mat = NeoHookeanMaterial(1e5, 0.3, visco_behavior=QLVBehavior(1.0, (0.1,), (0.1,)))
        elastic = NeoHookeanMaterial(1e5, 0.3)
        point = DeformedPoint.from_gradient(F_STRETCH)
        sigma, D = mat.compute_stress_and_tangent(point)
        sigma_e, D_e = elastic.compute_stress_and_tangent(point)
        np.testing.assert_allclose(sigma, 1.1 * sigma_e)
        np.testing.assert_allclose(D, 1.1 * D_e)

    def test_relaxation_under_held_strain(self):
        """같은 변형 유지 시 이력 hᵢ 가 e^(-Δt/τ) 로 감쇠."""
        behavior = QLVBehavior(1.0, (0.1,), (0.1,))
        mat = NeoHookeanMaterial(1e5, 0.3, visco_behavior=behavior)
        state = mat.create_state_object()
        assert isinstance(state, QLVState)
        point = DeformedPoint.from_gradient(F_STRETCH)
        sigma_e = NeoHookeanMaterial(1e5, 0.3).compute_stress(point)

        sigma0, _ = mat.compute_stress_and_tangent(point, state=state)
        np.testing.assert_allclose(sigma0, 1.1 * sigma_e)

        mat.visco_behavior.advance_state(state, 0.0, 0.1)
        assert state.dt == pytest.approx(0.1)
        sigma1, D1 = mat.compute_stress_and_tangent(point, state=state)
        np.testing.assert_allclose(sigma1, (1.0 + 0.1 * math.exp(-1.0)) * sigma_e)

        g = 1.0 - math.exp(-1.0)
        D_e = NeoHookeanMaterial(1e5, 0.3).compute_tangent(sigma_e, point)
        np.testing.assert_allclose(D1, (1.0 + 0.1 * g) * D_e)

    def test_uncommitted_trial_is_discarded(self):
        """advance_state 전 재평가는 같은 결과 (시행값만 갱신)."""
        mat = NeoHookeanMaterial(1e5, 0.3, visco_behavior=QLVBehavior())
        state = mat.create_state_object()
        point = DeformedPoint.from_gradient(F_STRETCH)
        first, _ = mat.compute_stress_and_tangent(point, state=state, want_tangent=False)
        second, D = mat.compute_stress_and_tangent(point, state=state, want_tangent=False)
        assert D is None
        np.testing.assert_allclose(first, second)

    def test_tangent_scale(self):
        b = QLVBehavior(0.5, (0.2, 0.3), (1.0, 2.0))
        assert b.tangent_scale(0.0) == pytest.approx(1.0)
        expected = 0.5 + 0.2 * (1 - math.exp(-0.5)) / 0.5 + 0.3 * (1 - math.exp(-0.25)) / 0.25
        assert b.tangent_scale(0.5) == pytest.approx(expected)

    def test_state_copy_and_reset(self):
        mat = NeoHookeanMaterial(visco_behavior=QLVBehavior())
        state = mat.create_state_object()
        mat.compute_stress_and_tangent(DeformedPoint.from_gradient(F_STRETCH), state=state)
        mat.visco_behavior.advance_state(state, 0.0, 0.01)
        snapshot = state.copy()
        state.reset()
        assert np.abs(snapshot.h).max() > 0.0
        assert np.abs(state.h).max() == 0.0


class TestViscoelasticCloning:
    """복제 격리."""

    def test_clone_isolation(self):
        """복제본의 relaxation 변경이 원본에 영향 없음."""
        mat = NeoHookeanMaterial(visco_behavior=QLVBehavior(relaxation_times=(0.1,)))
        twin = mat.clone()
        twin.visco_behavior.relaxation = 0.2
        assert mat.visco_behavior.relaxation == pytest.approx(0.1)
        assert twin.visco_behavior.relaxation == pytest.approx(0.2)

    def test_material_owns_a_copy(self):
        behavior = QLVBehavior()
        mat = NeoHookeanMaterial(visco_behavior=behavior)
        behavior.gamma_inf = 0.5
        assert mat.visco_behavior.gamma_inf == 1.0

    def test_set_visco_behavior_notifies(self):
        names = []
        mat = NeoHookeanMaterial()
        mat.add_change_listener(lambda src, name: names.append(name))
        mat.set_visco_behavior(QLVBehavior())
        mat.visco_behavior = None
        mat.visco_behavior = None
        assert names == ["visco_behavior", "visco_behavior"]
        assert not mat.is_viscoelastic()

    def test_nested_parameter_change_notifies_material(self):
        """소유 거동의 파라미터 변경 → 재료 리스너에 "visco_behavior" 통지."""
        names = []
        mat = NeoHookeanMaterial(visco_behavior=QLVBehavior())
        mat.add_change_listener(lambda src, name: names.append((src, name)))
        mat.visco_behavior.relaxation = 0.2
        assert names == [(mat, "visco_behavior")]

    def test_replaced_behavior_is_detached(self):
        names = []
        mat = NeoHookeanMaterial(visco_behavior=QLVBehavior())
        old = mat.visco_behavior
        mat.set_visco_behavior(QLVBehavior(gamma_inf=0.8))
        mat.add_change_listener(lambda src, name: names.append(name))
        old.relaxation = 0.3
        assert names == []
        mat.visco_behavior.gamma_inf = 0.9
        mat.visco_behavior = None
        old.gamma_inf = 0.5
        assert names == ["visco_behavior", "visco_behavior"]

    def test_clone_forwards_to_its_own_listeners(self):
        original_names = []
        twin_names = []
        mat = NeoHookeanMaterial(visco_behavior=QLVBehavior())
        mat.add_change_listener(lambda src, name: original_names.append(name))
        twin = mat.clone()
        twin.add_change_listener(lambda src, name: twin_names.append(name))
        twin.visco_behavior.relaxation = 0.2
        assert twin_names == ["visco_behavior"]
        assert original_names == []


class TestQLVParameters:

    def test_invalid_relaxation_keeps_previous(self):
        b = QLVBehavior()
        with pytest.raises(MaterialParameterError):
            b.relaxation = -1.0
        assert b.relaxation == pytest.approx(0.1)

    def test_mismatched_lengths_rejected(self):
        with pytest.raises(MaterialParameterError):
            QLVBehavior(1.0, (0.1, 0.2), (0.1,))

    def test_too_many_terms_rejected(self):
        with pytest.raises(MaterialParameterError):
            QLVBehavior(1.0, (0.1,) * 7, (1.0,) * 7)

    def test_equality(self):
        assert QLVBehavior() == QLVBehavior()
        assert QLVBehavior() != QLVBehavior(gamma_inf=0.9)
