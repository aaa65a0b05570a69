"""구성 재료 응력/접선, 능력 플래그, 복제/동등성 테스트."""

import pytest
import numpy as np

from biomech.fea.fem.core import DeformedPoint
from biomech.fea.fem.material import (
    BulkPotential,
    CubicHyperelastic,
    FemMaterial,
    FungMaterial,
    IncompNeoHookeanMaterial,
    IncompressibleMaterial,
    LinearMaterial,
    MooneyRivlinMaterial,
    NeoHookeanMaterial,
    NullMaterial,
    OgdenMaterial,
    QLVBehavior,
    StVenantKirchhoffMaterial,
)
from biomech.fea.fem.validation import InvalidDeformationError


def all_materials():
    return [
        LinearMaterial(),
        LinearMaterial(corotated=False),
        StVenantKirchhoffMaterial(),
        NeoHookeanMaterial(),
        IncompressibleMaterial(),
        IncompNeoHookeanMaterial(),
        MooneyRivlinMaterial(c10=1e5, c01=2e4, c11=5e3, c20=3e3, c02=1e3),
        CubicHyperelastic(g10=1e5, g20=2e4, g30=5e3),
        OgdenMaterial(mu=(1.5e5, 2e4), alpha=(2.5, -1.5)),
        FungMaterial(),
        NullMaterial(),
    ]


F_GENERAL = np.array([
    [1.08, 0.05, -0.02],
    [0.03, 0.97, 0.04],
    [-0.01, 0.02, 1.03],
])


# ───────────────── 시나리오 ─────────────────


class TestScenarios:
    """대표 변형에서의 응답."""

    def test_identity_linear(self):
        """F = I, E = 1000, ν = 0.3 → σ = 0, D[0,0] ≈ 1346.15, D[0,1] ≈ 576.92."""
        mat = LinearMaterial(youngs_modulus=1000.0, poissons_ratio=0.3)
        point = DeformedPoint.from_gradient(np.eye(3))
        sigma, D = mat.compute_stress_and_tangent(point)
        np.testing.assert_allclose(sigma, np.zeros((3, 3)), atol=1e-12)
        np.testing.assert_allclose(D, D.T)
        assert D[0, 0] == pytest.approx(1346.1538, rel=1e-6)
        assert D[0, 1] == pytest.approx(576.9231, rel=1e-6)
        assert D[3, 3] == pytest.approx(384.6154, rel=1e-6)

    def test_uniaxial_neo_hookean(self):
        """F = diag(1.1, 1, 1), μ = 500, K = 1000."""
        mat = NeoHookeanMaterial.from_moduli(shear=500.0, bulk=1000.0)
        lam, mu = mat.params.lame()
        assert mu == pytest.approx(500.0)
        assert lam == pytest.approx(1000.0 - 2.0 * 500.0 / 3.0)

        sigma = mat.compute_stress(DeformedPoint.from_gradient(np.diag([1.1, 1.0, 1.0])))
        assert sigma[0, 0] > 0.0
        assert sigma[1, 1] == pytest.approx(sigma[2, 2], rel=1e-12)
        off = sigma - np.diag(np.diag(sigma))
        np.testing.assert_array_equal(off, np.zeros((3, 3)))

    def test_mooney_rivlin_simple_shear(self):
        """부피 보존 전단: det F = 1, σ 대칭, σ_zz ≈ σ_yy."""
        F = np.array([[1.0, 0.2, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
        point = DeformedPoint.from_gradient(F)
        assert point.det_f == 1.0
        sigma = MooneyRivlinMaterial().compute_stress(point)
        np.testing.assert_allclose(sigma, sigma.T, atol=1e-9)
        assert sigma[2, 2] == pytest.approx(sigma[1, 1], abs=1e-6 * np.abs(sigma).max())
        assert sigma[0, 1] > 0.0


# ───────────────── 불변 성질 ─────────────────


class TestInvariants:
    """모든 재료 공통 성질."""

    @pytest.mark.parametrize("mat", all_materials(), ids=lambda m: type(m).__name__)
    def test_stress_and_tangent_symmetric(self, mat):
        point = DeformedPoint.from_gradient(F_GENERAL, pressure=250.0)
        sigma, D = mat.compute_stress_and_tangent(point)
        np.testing.assert_allclose(sigma, sigma.T, atol=1e-10 * max(1.0, np.abs(sigma).max()))
        np.testing.assert_allclose(D, D.T, atol=1e-10 * max(1.0, np.abs(D).max()))
        assert np.all(np.isfinite(sigma)) and np.all(np.isfinite(D))

    def test_second_pk_round_trip(self):
        """σ → S → σ (상대 1e-12)."""
        point = DeformedPoint.from_gradient(F_GENERAL)
        sigma = np.array([[3.0, 1.0, -0.5], [1.0, 2.0, 0.25], [-0.5, 0.25, -1.0]])
        S = FemMaterial.cauchy_to_second_pk_stress(sigma, point)
        back = FemMaterial.second_pk_to_cauchy_stress(S, point)
        np.testing.assert_allclose(back, sigma, rtol=1e-12, atol=1e-12 * np.abs(sigma).max())

    @pytest.mark.parametrize("mat", all_materials(), ids=lambda m: type(m).__name__)
    def test_stress_free_reference(self, mat):
        """F = I, p = 0 → σ = 0."""
        sigma = mat.compute_stress(DeformedPoint.from_gradient(np.eye(3)))
        np.testing.assert_allclose(sigma, np.zeros((3, 3)), atol=1e-8)

    def test_initial_tangents_agree(self):
        """미소변형 접선: Neo-Hookean = SVK = Linear."""
        D_lin = LinearMaterial(1e6, 0.3).get_elasticity_tensor()
        np.testing.assert_allclose(NeoHookeanMaterial(1e6, 0.3).get_elasticity_tensor(), D_lin, rtol=1e-12)
        np.testing.assert_allclose(StVenantKirchhoffMaterial(1e6, 0.3).get_elasticity_tensor(), D_lin, rtol=1e-12)

    def test_ogden_alpha_two_equals_incomp_neo_hookean(self):
        """α = 2 한 항 Ogden = G = μ 비압축 Neo-Hookean."""
        point = DeformedPoint.from_gradient(F_GENERAL, pressure=100.0)
        ogden = OgdenMaterial(mu=(1e5,), alpha=(2.0,)).compute_stress(point)
        nh = IncompNeoHookeanMaterial(shear_modulus=1e5).compute_stress(point)
        np.testing.assert_allclose(ogden, nh, atol=1e-8 * np.abs(nh).max())

    def test_mooney_rivlin_reduces_to_neo_hookean(self):
        """C01 = 0, C10 = G/2 → 비압축 Neo-Hookean."""
        point = DeformedPoint.from_gradient(F_GENERAL)
        mr = MooneyRivlinMaterial(c10=5e4).compute_stress(point)
        nh = IncompNeoHookeanMaterial(shear_modulus=1e5).compute_stress(point)
        np.testing.assert_allclose(mr, nh, atol=1e-9 * np.abs(nh).max())

    def test_pressure_only(self):
        """IncompressibleMaterial: σ = p I, D = p(I⊗I - 2𝕀)."""
        mat = IncompressibleMaterial()
        point = DeformedPoint.from_gradient(F_GENERAL, pressure=40.0)
        sigma, D = mat.compute_stress_and_tangent(point)
        np.testing.assert_allclose(sigma, 40.0 * np.eye(3))
        assert D[0, 0] == pytest.approx(-40.0)
        assert D[0, 1] == pytest.approx(40.0)
        assert D[3, 3] == pytest.approx(-40.0)


# ───────────────── 반전 / 실패 정책 ─────────────────


class TestInvertedDeformation:
    """J ≤ 0 처리."""

    F_INVERTED = np.diag([-0.5, 1.0, 1.0])

    def test_non_invertible_returns_sentinel(self):
        mat = NeoHookeanMaterial()
        point = DeformedPoint.from_gradient(self.F_INVERTED)
        sigma, D = mat.compute_stress_and_tangent(point)
        np.testing.assert_array_equal(sigma, np.zeros((3, 3)))
        np.testing.assert_allclose(D, mat.get_elasticity_tensor())

    def test_invertible_linear_still_evaluates(self):
        mat = LinearMaterial(corotated=False)
        assert mat.is_invertible()
        sigma = mat.compute_stress(DeformedPoint.from_gradient(self.F_INVERTED))
        assert sigma[0, 0] < 0.0

    def test_validate_deformation_raises(self):
        point = DeformedPoint.from_gradient(self.F_INVERTED)
        point.set_provenance(7, 0, [], [])
        with pytest.raises(InvalidDeformationError) as exc_info:
            MooneyRivlinMaterial().validate_deformation(point)
        assert exc_info.value.element_number == 7
        LinearMaterial().validate_deformation(point)

    def test_non_finite_falls_back(self):
        """지수 발산 (Fung) → 0 응력."""
        mat = FungMaterial(cc=1e-3)
        point = DeformedPoint.from_gradient(np.diag([3.0, 0.5, 0.8]))
        sigma, D = mat.compute_stress_and_tangent(point)
        assert np.all(np.isfinite(sigma)) and np.all(np.isfinite(D))


# ───────────────── 공회전 선형 재료 ─────────────────


class TestCorotatedLinear:

    def test_rigid_rotation_is_stress_free(self):
        th = 0.6
        R = np.array([[np.cos(th), -np.sin(th), 0.0], [np.sin(th), np.cos(th), 0.0], [0.0, 0.0, 1.0]])
        sigma = LinearMaterial().compute_stress(DeformedPoint.from_gradient(R))
        np.testing.assert_allclose(sigma, np.zeros((3, 3)), atol=1e-9)

    def test_uses_point_rotation(self):
        """점에 R이 있으면 극분해 대신 사용."""
        th = 0.3
        R = np.array([[np.cos(th), -np.sin(th), 0.0], [np.sin(th), np.cos(th), 0.0], [0.0, 0.0, 1.0]])
        U = np.diag([1.01, 1.0, 1.0])
        mat = LinearMaterial(1000.0, 0.3)
        with_r = mat.compute_stress(DeformedPoint.from_gradient(R @ U, R=R))
        polar = mat.compute_stress(DeformedPoint.from_gradient(R @ U))
        np.testing.assert_allclose(with_r, polar, atol=1e-10)

    def test_non_corotated_small_strain(self):
        mat = LinearMaterial(1000.0, 0.3, corotated=False)
        assert not mat.is_corotated()
        sigma = mat.compute_stress(DeformedPoint.from_gradient(np.diag([1.001, 1.0, 1.0])))
        lam, mu = mat.params.lame()
        assert sigma[0, 0] == pytest.approx((lam + 2 * mu) * 1e-3)
        assert sigma[1, 1] == pytest.approx(lam * 1e-3)

    def test_cached_tangent_invalidated(self):
        mat = LinearMaterial(1000.0, 0.3)
        D1 = mat.get_elasticity_tensor()
        mat.youngs_modulus = 2000.0
        np.testing.assert_allclose(mat.get_elasticity_tensor(), 2.0 * D1)


# ───────────────── 플래그 / 복제 / 동등성 ─────────────────


class TestFlagsAndCloning:

    def test_capability_flags(self):
        lin = LinearMaterial()
        assert lin.is_invertible() and lin.is_linear() and lin.is_corotated()
        assert not lin.is_incompressible()
        nh = NeoHookeanMaterial()
        assert not nh.is_invertible() and not nh.is_linear() and not nh.is_corotated()
        for mat in (IncompressibleMaterial(), MooneyRivlinMaterial(), OgdenMaterial(), FungMaterial()):
            assert mat.is_incompressible()
        null = NullMaterial()
        assert null.is_invertible() and null.is_linear()

    def test_state_requires_viscoelastic_nonlinear(self):
        assert NeoHookeanMaterial().create_state_object() is None
        nh = NeoHookeanMaterial(visco_behavior=QLVBehavior())
        assert nh.is_viscoelastic() and nh.has_state()
        assert nh.create_state_object() is not None
        lin = LinearMaterial(visco_behavior=QLVBehavior())
        assert lin.is_viscoelastic() and not lin.has_state()

    def test_clone_is_equal_and_independent(self):
        mat = MooneyRivlinMaterial(c10=1e5, c01=1e4, visco_behavior=QLVBehavior())
        twin = mat.clone()
        assert twin == mat
        assert twin is not mat
        twin.c01 = 2e4
        assert twin != mat
        assert mat.c01 == 1e4

    def test_clone_does_not_copy_listeners(self):
        calls = []
        mat = NeoHookeanMaterial()
        mat.add_change_listener(lambda src, name: calls.append(name))
        twin = mat.clone()
        twin.youngs_modulus = 1e6
        assert calls == []

    def test_equality_by_type_and_params(self):
        assert NeoHookeanMaterial(1e5, 0.3) == NeoHookeanMaterial(1e5, 0.3)
        assert NeoHookeanMaterial(1e5, 0.3) != StVenantKirchhoffMaterial(1e5, 0.3)
        assert NeoHookeanMaterial(1e5, 0.3) != NeoHookeanMaterial(1e5, 0.3, visco_behavior=QLVBehavior())

    def test_from_engineering_mooney_rivlin(self):
        mat = MooneyRivlinMaterial.from_engineering(1e6, 0.45, beta=1.0)
        mu = 1e6 / 2.9
        assert mat.c10 == pytest.approx(mu / 2.0)
        assert mat.c01 == pytest.approx(0.0)
        assert mat.bulk_modulus == pytest.approx(1e6 / (3.0 * 0.1))

    def test_bulk_potential(self):
        quad = IncompressibleMaterial(bulk_modulus=100.0)
        log = IncompressibleMaterial(bulk_modulus=100.0, bulk_potential=BulkPotential.LOGARITHMIC)
        assert quad.compute_pressure(1.1) == pytest.approx(10.0)
        assert log.compute_pressure(1.1) == pytest.approx(100.0 * np.log(1.1) / 1.1)
        assert quad.compute_d2udj2(0.9) == 100.0
        assert log.compute_dudj(1.0) == 0.0

    def test_ogden_set_term(self):
        mat = OgdenMaterial()
        mat.set_term(2, 1000.0, 4.0)
        assert mat.mu == (150000.0, 0.0, 1000.0)
        assert mat.alpha == (2.0, 2.0, 4.0)

    def test_repr_lists_params(self):
        assert "youngs_modulus" in repr(NeoHookeanMaterial())
