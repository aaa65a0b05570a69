"""평면 관절(PlanarJoint): 범위, 자세 보정, 복제, 속성, 렌더링 테스트."""

import math

import pytest
import numpy as np

from biomech.fea.framework import BodyRegistry, RigidBody
from biomech.fea.framework.joints import (
    DoubleInterval,
    LineStyle,
    PlanarJoint,
    RenderFlags,
    RenderProps,
)
from biomech.fea.fem.validation import FEAValidationError
from biomech.utils.transform import RigidTransform, axis_angle_matrix, z_rotation


def tilted_pose(theta: float = 0.5, tilt: float = 0.1, p=(1.0, 2.0, 3.0)) -> RigidTransform:
    return RigidTransform(z_rotation(theta) @ axis_angle_matrix((1.0, 0.0, 0.0), tilt), p)


@pytest.fixture
def registry():
    reg = BodyRegistry()
    reg.add(RigidBody("a", tilted_pose()))
    reg.add(RigidBody("b", dynamic=True))
    reg.add(RigidBody("base", dynamic=False))
    return reg


@pytest.fixture
def grounded(registry):
    """A만 연결, D = 월드 원점."""
    return PlanarJoint(registry, "a", RigidTransform.identity())


class RecordingRenderer:
    def __init__(self):
        self.calls = []

    def draw_line(self, props, p0, p1, color=None, capped=True, selected=False):
        self.calls.append((props, np.array(p0), np.array(p1), color, capped, selected))


# ───────────────── 좌표 / 사영 ─────────────────


class TestCoordinates:

    def test_projection_scenario(self, grounded):
        """TCD: p = (1, 2, 3), x 기울기 0.1, z 회전 0.5 → x = 1, y = 2, θ = 0.5 rad."""
        assert grounded.get_x() == pytest.approx(1.0)
        assert grounded.get_y() == pytest.approx(2.0)
        assert grounded.get_theta() == pytest.approx(math.degrees(0.5))

    def test_detached_returns_last_set(self, registry):
        joint = PlanarJoint(registry)
        assert not joint.is_connected_to_bodies()
        assert joint.get_current_tcd() is None
        joint.set_x(0.25)
        joint.theta = 12.0
        assert joint.x == 0.25
        assert joint.theta == pytest.approx(12.0)

    def test_set_moves_body_a_when_grounded(self, grounded, registry):
        grounded.set_x(-0.5)
        tcd = grounded.get_current_tcd()
        np.testing.assert_allclose(tcd.p, [-0.5, 2.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(tcd.R[:, 2], [0.0, 0.0, 1.0], atol=1e-12)
        assert registry.get("a").pose.p[0] == pytest.approx(-0.5)

    def test_set_moves_dynamic_body_b(self, registry):
        joint = PlanarJoint(registry, "a", RigidTransform.identity(), "b", RigidTransform.identity())
        pose_a = registry.get("a").pose.copy()
        joint.set_theta(40.0)
        assert registry.get("a").pose.allclose(pose_a)
        assert joint.get_theta() == pytest.approx(40.0)
        assert joint.get_x() == pytest.approx(1.0)

    def test_static_body_b_counts_as_ground(self, registry):
        joint = PlanarJoint(registry, "a", RigidTransform.identity(), "base", RigidTransform.identity())
        joint.set_y(0.0)
        assert registry.get("base").pose.allclose(RigidTransform.identity())
        assert registry.get("a").pose.p[1] == pytest.approx(0.0, abs=1e-12)

    def test_adjust_poses_satisfies_tgd(self, registry):
        joint = PlanarJoint(registry, "a", RigidTransform.identity(), "b", RigidTransform.identity())
        tgd = RigidTransform(z_rotation(0.3), (0.1, 0.2, 0.0))
        joint.adjust_poses(tgd)
        assert joint.get_current_tcd().allclose(tgd, atol=1e-12)

    def test_set_bodies_from_world(self, registry):
        tdw = RigidTransform(axis_angle_matrix((0.0, 1.0, 0.0), 0.3), (0.5, 0.0, 1.0))
        joint = PlanarJoint(registry)
        joint.set_bodies_from_world("a", "b", tdw)
        assert joint.get_current_tcw().allclose(tdw, atol=1e-12)
        assert joint.get_current_tdw().allclose(tdw, atol=1e-12)
        assert joint.get_x() == pytest.approx(0.0, abs=1e-12)

    def test_from_point_and_axis(self, registry):
        joint = PlanarJoint.from_point_and_axis(registry, "a", None, (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        tdw = joint.get_current_tdw()
        np.testing.assert_allclose(tdw.R[:, 2], [0.0, 1.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(tdw.p, [1.0, 0.0, 0.0])
        assert joint.body_b is None

    def test_unknown_body(self, registry):
        with pytest.raises(KeyError):
            PlanarJoint(registry, "ghost", RigidTransform.identity())


# ───────────────── 범위 ─────────────────


class TestRanges:

    def test_theta_clamp(self, grounded):
        """θ 범위 [-30°, 30°] 에서 set_theta(45°) → 30°."""
        grounded.set_theta_range(-30.0, 30.0)
        grounded.set_theta(45.0)
        assert grounded.get_theta() == pytest.approx(30.0)

    def test_theta_clamped_in_degrees_before_conversion(self, registry):
        """도 단위 범위로 먼저 자른 뒤 라디안으로 변환."""
        joint = PlanarJoint(registry)
        joint.set_theta_range(-30.0, 30.0)
        joint.set_theta(45.0)
        assert joint.coupling.get_theta() == math.radians(30.0)
        joint.set_theta(float("nan"))
        assert joint.coupling.get_theta() == 0.0

    def test_xy_clamped_by_joint_range(self, registry):
        joint = PlanarJoint(registry)
        joint.set_x_range(-1.0, 1.0)
        joint.set_y_range(0.5, 2.0)
        joint.set_x(7.0)
        joint.set_y(float("nan"))
        assert joint.get_x() == 1.0
        assert joint.get_y() == 0.5

    def test_theta_clamp_detached(self, registry):
        joint = PlanarJoint(registry)
        joint.set_theta_range(DoubleInterval(-30.0, 30.0))
        joint.set_theta(45.0)
        assert joint.get_theta() == pytest.approx(30.0)
        rng = joint.coupling.get_coordinate_range(joint.coupling.THETA_IDX)
        assert rng.upper == pytest.approx(math.radians(30.0))

    @pytest.mark.parametrize("value", [-3.0, -0.2, 0.0, 0.7, 4.0])
    def test_clip_to_range_connected(self, grounded, value):
        grounded.set_x_range(-1.0, 1.0)
        grounded.set_y_range((-0.5, 2.5))
        grounded.set_x(value)
        grounded.set_y(value)
        assert grounded.get_x() == pytest.approx(min(max(value, -1.0), 1.0), abs=1e-12)
        assert grounded.get_y() == pytest.approx(min(max(value, -0.5), 2.5), abs=1e-12)

    def test_range_reclips_current_value(self, grounded, registry):
        """연결 상태에서 범위 축소 → 현재 좌표를 자르고 물체 이동."""
        grounded.set_x_range(-0.5, 0.5)
        assert grounded.get_x() == pytest.approx(0.5)
        assert registry.get("a").pose.p[0] == pytest.approx(0.5)

    def test_min_max_setters_keep_other_end(self, registry):
        joint = PlanarJoint(registry)
        joint.set_x_range(-1.0, 1.0)
        joint.set_max_x(3.0)
        assert joint.x_range == DoubleInterval(-1.0, 3.0)
        joint.set_min_theta(-90.0)
        joint.set_max_theta(45.0)
        assert joint.theta_range == DoubleInterval(-90.0, 45.0)
        joint.set_min_y(0.0)
        joint.set_max_y(0.0)
        assert joint.y_range == DoubleInterval(0.0, 0.0)

    def test_invalid_range(self, registry):
        with pytest.raises(FEAValidationError):
            PlanarJoint(registry).set_x_range(1.0, -1.0)


# ───────────────── 속성 / 복제 ─────────────────


class TestPropertiesAndCopy:

    def test_declared_properties(self, grounded):
        names = grounded.property_names()
        for name in ("x", "x_range", "y", "y_range", "theta", "theta_range", "compliance", "damping"):
            assert name in names
        assert grounded.property_info("theta").format == "1E %8.3f [-360,360]"

    def test_notifications(self, grounded):
        calls = []
        grounded.add_change_listener(lambda src, name: calls.append(name))
        grounded.set_theta(10.0)
        grounded.set_property("axis_length", 2.0)
        grounded.compliance = [0.0, 0.0, 1e-3, 1e-3, 1e-3, 0.0]
        grounded.set_x_range(-10.0, 10.0)
        assert calls == ["theta", "axis_length", "compliance", "x_range"]

    def test_compliance_damping_validation(self, grounded):
        np.testing.assert_array_equal(grounded.compliance, np.zeros(6))
        np.testing.assert_array_equal(grounded.damping, np.zeros(6))
        with pytest.raises(FEAValidationError):
            grounded.damping = [1.0] * 5
        with pytest.raises(FEAValidationError):
            grounded.compliance = [-1.0] + [0.0] * 5
        with pytest.raises(FEAValidationError):
            grounded.axis_length = -1.0

    def test_copy(self, grounded):
        grounded.axis_length = 0.4
        grounded.render_props = RenderProps(line_style=LineStyle.CYLINDER, line_radius=0.02)
        grounded.set_theta_range(-45.0, 45.0)
        twin = grounded.copy()
        assert not twin.is_connected_to_bodies()
        assert twin.coupling is not grounded.coupling
        assert twin.axis_length == 0.4
        assert twin.render_props == grounded.render_props
        assert twin.render_props is not grounded.render_props
        assert twin.theta_range == DoubleInterval(-45.0, 45.0)
        assert twin.x_range == grounded.x_range


# ───────────────── 렌더링 ─────────────────


class TestRendering:

    def test_default_render_props(self, registry):
        """기본 축: 파란 원기둥."""
        joint = PlanarJoint(registry)
        assert joint.render_props.line_style == LineStyle.CYLINDER
        assert joint.render_props.line_color == (0.0, 0.0, 1.0)
        assert PlanarJoint.default_render_props() == joint.render_props

    def test_axis_end_points(self, registry):
        joint = PlanarJoint.from_point_and_axis(registry, "a", None, (1.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        joint.axis_length = 2.0
        p0, p1 = joint.compute_axis_end_points()
        np.testing.assert_allclose(p0, [1.0, 0.0, -1.0], atol=1e-12)
        np.testing.assert_allclose(p1, [1.0, 0.0, 1.0], atol=1e-12)

    def test_render_draws_capped_line(self, registry):
        joint = PlanarJoint.from_point_and_axis(registry, "a", None, (0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        joint.axis_length = 1.0
        pose_before = registry.get("a").pose.copy()
        renderer = RecordingRenderer()
        joint.render(renderer, RenderFlags.SELECTED)
        assert len(renderer.calls) == 1
        props, p0, p1, color, capped, selected = renderer.calls[0]
        assert capped and selected
        assert props is joint.render_props
        np.testing.assert_allclose(p1 - p0, [0.0, 0.0, 1.0], atol=1e-12)
        assert registry.get("a").pose.allclose(pose_before)

    def test_render_skipped_without_axis(self, grounded):
        renderer = RecordingRenderer()
        grounded.render(renderer)
        assert renderer.calls == []

    def test_update_bounds_in_place(self, registry):
        joint = PlanarJoint.from_point_and_axis(registry, "a", None, (0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        joint.axis_length = 4.0
        pmin = np.zeros(3)
        pmax = np.zeros(3)
        joint.update_bounds(pmin, pmax)
        np.testing.assert_allclose(pmin, [0.0, 0.0, -2.0], atol=1e-12)
        np.testing.assert_allclose(pmax, [0.0, 0.0, 2.0], atol=1e-12)
