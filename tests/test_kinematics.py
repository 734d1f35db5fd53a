import io
import math

import pytest

from nxtarm.fileio import TokenReader
from nxtarm.kinematics import (
    ALPHA_MAX,
    ALPHA_MIN,
    GROUND_HEIGHT,
    J3_PHYS_LIM,
    MAX_DIST,
    SHOULDER,
    FOREARM,
    AngleSet,
    Point,
    angles_valid,
    calc_alpha,
    calc_angle_set,
    calc_beta,
    calc_max_beta,
    calc_theta,
    is_within_range,
    is_z_value_valid,
    read_point,
    validate_point,
)


def _reader(text: bytes) -> TokenReader:
    return TokenReader(io.BytesIO(text))


def test_read_point_fields_in_order():
    point = read_point(_reader(b"1.5 -2 3.25\r\n40 500"))
    assert (point.x, point.y, point.z) == (1.5, -2.0, 3.25)
    assert point.gp == 40
    assert point.t_ms_delay == 500
    assert point.is_valid is False


def test_read_point_truncated_input_raises():
    with pytest.raises(EOFError):
        read_point(_reader(b"1 2 3"))


def test_reach_limit_is_354():
    assert not is_within_range(Point(x=354))
    assert is_within_range(Point(x=353.9))


def test_z_value_boundary():
    assert not is_z_value_valid(Point(z=GROUND_HEIGHT))
    assert is_z_value_valid(Point(z=GROUND_HEIGHT + 1))


def test_within_range_boundary():
    assert not is_within_range(Point(x=MAX_DIST))
    assert is_within_range(Point(x=MAX_DIST - 1))
    assert not is_within_range(Point(x=0, y=0, z=-MAX_DIST))


def test_full_extension_angles():
    reach = SHOULDER + FOREARM
    assert calc_beta(reach) == pytest.approx(0.0, abs=1e-9)
    assert calc_alpha(Point(x=reach), reach, reach) == pytest.approx(90.0)


def test_theta_quadrants():
    assert calc_theta(Point(x=1, y=1)) == pytest.approx(45.0)
    assert calc_theta(Point(x=5, y=0)) == 0.0
    assert calc_theta(Point(x=1, y=1)) == pytest.approx(-calc_theta(Point(x=1, y=-1)))


@pytest.mark.parametrize("distance", [60.0, 150.0, 250.0, 340.0])
def test_beta_satisfies_law_of_cosines(distance):
    beta = math.radians(calc_beta(distance))
    rebuilt = SHOULDER**2 + FOREARM**2 - 2 * SHOULDER * FOREARM * math.cos(beta + math.pi)
    assert math.sqrt(rebuilt) == pytest.approx(distance)


def test_unreachable_short_distance_gives_nan():
    alpha = calc_alpha(Point(x=10), 10.0, 10.0)
    beta = calc_beta(0.0)
    assert math.isnan(alpha)
    assert math.isnan(beta)
    assert angles_valid(AngleSet(alpha=alpha, beta=beta)) is False


def test_angle_set_theta_independent_of_rotation():
    a = calc_angle_set(Point(x=200, y=0, z=-150))
    b = calc_angle_set(Point(x=0, y=200, z=-150))
    assert a.alpha == pytest.approx(b.alpha)
    assert a.beta == pytest.approx(b.beta)
    assert b.theta - a.theta == pytest.approx(90.0)


def test_calc_max_beta_is_capped():
    assert calc_max_beta(AngleSet(alpha=ALPHA_MIN)) == J3_PHYS_LIM
    assert calc_max_beta(AngleSet(alpha=ALPHA_MAX)) == 180 - ALPHA_MAX


def test_angles_valid_cases():
    assert angles_valid(AngleSet(alpha=90, beta=0))
    assert not angles_valid(AngleSet(alpha=ALPHA_MAX, beta=180 - ALPHA_MAX))
    assert not angles_valid(AngleSet(alpha=ALPHA_MIN - 1, beta=0))
    assert not angles_valid(AngleSet(alpha=ALPHA_MAX + 1, beta=0))
    assert not angles_valid(AngleSet(alpha=math.nan, beta=0))


def test_validate_reachable_point():
    angles = validate_point(Point(x=200, y=0, z=-150, gp=30, t_ms_delay=700))
    assert angles.is_valid
    assert angles.theta == 0.0
    assert ALPHA_MIN <= angles.alpha <= ALPHA_MAX
    assert angles.gp == 30
    assert angles.t_ms_delay == 700


def test_validate_out_of_range_point_keeps_zero_angles():
    angles = validate_point(Point(x=400, y=0, z=0, gp=5, t_ms_delay=100))
    assert not angles.is_valid
    assert (angles.alpha, angles.beta, angles.theta) == (0.0, 0.0, 0.0)
    assert (angles.gp, angles.t_ms_delay) == (5, 100)


def test_validate_point_too_close_is_invalid():
    assert not validate_point(Point(x=10, y=0, z=0)).is_valid


def test_validate_point_below_ground_is_invalid():
    assert not validate_point(Point(x=50, y=0, z=GROUND_HEIGHT - 5)).is_valid