"""Inverse kinematics and reachability checks for the three-joint arm.

Joint 1 turns the arm about the vertical axis (theta), joint 2 raises the
shoulder (alpha, measured from straight down) and joint 3 bends the elbow
(beta, relative to the shoulder). The origin lies between the two servos.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from nxtarm.fileio import TokenReader

# Mechanical data, in millimetres and degrees
GROUND_HEIGHT = -230
FOREARM = 197
SHOULDER = 157
MAX_DIST = SHOULDER + FOREARM
ALPHA_MAX = 150
ALPHA_MIN = 60
J3_PHYS_LIM = 90
NUM_POINTS = 10
GEAR_REDUCTION = 5
FULL_ROTATION_EC = 360 * GEAR_REDUCTION

# Number of points held in memory at once
BATCH_SIZE = 8


@dataclass
class Point:
    """A target position of the gripper, with its gripper setting and pause."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    t_ms_delay: int = 0
    gp: int = 0
    is_valid: bool = False


@dataclass
class AngleSet:
    """Joint angles in degrees, with the gripper setting and pause to apply."""

    alpha: float = 0.0
    beta: float = 0.0
    theta: float = 0.0
    t_ms_delay: int = 0
    gp: int = 0
    is_valid: bool = False


def _acos_of_ratio(num: float, denom: float) -> float:
    """Arc cosine of ``num / denom``; NaN where it is undefined."""
    if denom == 0:
        return math.nan
    ratio = num / denom
    if not -1.0 <= ratio <= 1.0:
        return math.nan
    return math.acos(ratio)


def read_point(reader: TokenReader) -> Point:
    """Read x, y, z, gripper position and delay (ms) from ``reader``."""
    x = reader.read_float()
    y = reader.read_float()
    z = reader.read_float()
    gp = reader.read_int()
    delay = reader.read_int()
    return Point(x=x, y=y, z=z, gp=gp, t_ms_delay=delay)


def is_z_value_valid(point: Point) -> bool:
    """True if the point lies above the ground."""
    return point.z > GROUND_HEIGHT


def is_within_range(point: Point) -> bool:
    """True if the point is closer to the origin than the arm's full reach."""
    return math.sqrt(point.x**2 + point.y**2 + point.z**2) < MAX_DIST


def calc_alpha(point: Point, distance_xy: float, distance_plane: float) -> float:
    """Shoulder angle from the vertical, in degrees (NaN if unreachable)."""
    a1 = math.atan2(point.z, distance_xy)
    num = FOREARM**2 - SHOULDER**2 - distance_plane**2
    denom = -2.0 * SHOULDER * distance_plane
    a2 = _acos_of_ratio(num, denom)
    return math.degrees(a1 + a2 + math.pi / 2.0)


def calc_beta(distance_plane: float) -> float:
    """Elbow angle relative to the shoulder, in degrees (NaN if unreachable)."""
    num = distance_plane**2 - SHOULDER**2 - FOREARM**2
    denom = -2.0 * SHOULDER * FOREARM
    return math.degrees(_acos_of_ratio(num, denom) - math.pi)


def calc_theta(point: Point) -> float:
    """Angle of the point in the XY plane, in degrees."""
    return math.degrees(math.atan2(point.y, point.x))


def calc_angle_set(point: Point) -> AngleSet:
    """Compute alpha, beta and theta for ``point``."""
    distance_xy = math.hypot(point.x, point.y)
    distance_plane = math.sqrt(distance_xy**2 + point.z**2)
    return AngleSet(
        alpha=calc_alpha(point, distance_xy, distance_plane),
        beta=calc_beta(distance_plane),
        theta=calc_theta(point),
    )


def calc_max_beta(angles: AngleSet) -> float:
    """Largest elbow angle allowed for the shoulder angle of ``angles``."""
    return min(180 - angles.alpha, J3_PHYS_LIM)


def angles_valid(angles: AngleSet) -> bool:
    """True if alpha is within its limits and beta is below its maximum."""
    if not ALPHA_MIN <= angles.alpha <= ALPHA_MAX:
        return False
    return angles.beta < calc_max_beta(angles)


def validate_point(point: Point) -> AngleSet:
    """Return the joint angles for ``point`` with ``is_valid`` set.

    Angles are only computed for points within reach and above the ground;
    otherwise they are left at zero. The gripper setting and delay are
    always carried over.
    """
    valid = False
    angles = AngleSet()
    if is_within_range(point) and is_z_value_valid(point):
        angles = calc_angle_set(point)
        valid = angles_valid(angles)
    return replace(angles, gp=point.gp, t_ms_delay=point.t_ms_delay, is_valid=valid)