"""Driving the arm's joints, its gripper and the calibration of joint 1."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Optional

from nxtarm.kinematics import FULL_ROTATION_EC, GEAR_REDUCTION, AngleSet
from nxtarm.servo import ServoController, SensorPort

# Port and servo assignments
S_TOUCH = SensorPort.S1
S_COLOR = SensorPort.S2
S_ULTRA = SensorPort.S3
S_SERVO = SensorPort.S4
J2 = 1
J3 = 2
GRIPPER = 3

MAX_SPEED = 70
MIN_SPEED = 10
ANGLE_CHANGE = 40

CALIBRATION_POWER = 30
GRIPPER_OPEN = 90
GRIPPER_CLOSED = 20


class BallColor(enum.IntEnum):
    """Readings of the colour sensor for the objects the gripper handles."""

    NOTHING = 1
    BASKETBALL = 2
    TENNISBALL = 3
    FOOTBALL = 6


def _no_obstacle(encoder: int) -> int:
    return 255


@dataclass
class ArmHardware:
    """Simulated motor, encoder and sensors of the arm's base.

    While powered, the joint 1 motor turns one encoder count per reading
    in the direction of its power. The ultrasonic sensor reports
    ``ultrasonic(encoder)``.
    """

    encoder: int = 0
    motor_power: int = 0
    color: int = BallColor.NOTHING
    touch: int = 0
    ultrasonic: Callable[[int], int] = field(default=_no_obstacle)

    def read_encoder(self) -> int:
        """Return the raw encoder count."""
        if self.motor_power > 0:
            self.encoder += 1
        elif self.motor_power < 0:
            self.encoder -= 1
        return self.encoder

    def reset_encoder(self) -> None:
        self.encoder = 0

    def set_motor_power(self, power: int) -> None:
        self.motor_power = int(power)

    def read_ultrasonic(self) -> int:
        return self.ultrasonic(self.encoder)

    def read_color(self) -> int:
        return self.color

    def read_touch(self) -> int:
        return self.touch


def smooth_motion_func(index: float, max_speed: int, min_speed: int) -> int:
    """Logistic speed ramp: ``1 / (1 + 10**(2 - 4x))`` scaled to the speed range."""
    percent = 1.0 if index > 1 else 1.0 / (1.0 + 10 ** (2 - 4 * index))
    return int((max_speed - min_speed) * percent) + min_speed


def smooth_motion(current_diff: int, initial_diff: int) -> int:
    """Motor power for a move that has covered ``current_diff`` of ``initial_diff`` counts.

    The power ramps up from the start and down again towards the end.
    """
    index = float(current_diff)
    if current_diff > initial_diff / 2.0:
        index = initial_diff - index
    index /= ANGLE_CHANGE * 5
    return smooth_motion_func(index, MAX_SPEED, MIN_SPEED)


def wrap_encoder(count: int) -> int:
    """Reduce an encoder count to the range 0 to one full rotation."""
    return count % FULL_ROTATION_EC


def joint2_command(angle: float) -> float:
    """Servo position that gives shoulder angle ``angle`` (fitted quadratic)."""
    return 0.0014 * angle * angle + 1.5288 * angle - 173.79


def joint3_command(angle: float) -> float:
    """Servo position that gives elbow angle ``angle`` (fitted quadratic)."""
    return -0.0007 * angle * angle + 0.9882 * angle + 21.773


def _div_toward_zero(value: int, divisor: int) -> int:
    quotient = abs(value) // abs(divisor)
    return quotient if (value >= 0) == (divisor > 0) else -quotient


def map_range(input_min: int, input_max: int, output_min: int, output_max: int, value: int) -> int:
    """Map ``value`` linearly between integer ranges, truncating toward zero."""
    span = (value - input_min) * (output_max - output_min)
    return _div_toward_zero(span, input_max - input_min) + output_min


class Arm:
    """The arm: joint 1 on a geared motor, joints 2 and 3 and the gripper on servos."""

    def __init__(self, hardware: ArmHardware, servos: ServoController) -> None:
        self.hardware = hardware
        self.servos = servos

    def encoder_position(self) -> int:
        """Current joint 1 encoder count within one rotation."""
        return wrap_encoder(self.hardware.read_encoder())

    def move_joint1(self, angle: float) -> None:
        """Turn joint 1 to ``angle`` degrees by the shorter way round."""
        if angle < 0:
            angle += 360
        target = int(angle * FULL_ROTATION_EC / 360.0) % FULL_ROTATION_EC
        diff = target - self.encoder_position()
        initial = diff
        while diff != 0:
            forward = -1 if abs(diff) > FULL_ROTATION_EC / 2.0 else 1
            cw = -1 if diff > 0 else 1
            power = smooth_motion(abs(initial - diff), abs(initial))
            self.hardware.set_motor_power(-power * cw * forward)
            diff = target - self.encoder_position()
        self.hardware.set_motor_power(0)

    def move_joint2(self, angle: float) -> Optional[bytes]:
        """Set the shoulder to ``angle`` degrees (60 to 150)."""
        return self.servos.set_servo_position(S_SERVO, J2, joint2_command(angle))

    def move_joint3(self, angle: float) -> Optional[bytes]:
        """Set the elbow to ``angle`` degrees."""
        return self.servos.set_servo_position(S_SERVO, J3, joint3_command(angle))

    def move_robot(self, angles: AngleSet) -> None:
        """Move the shoulder, then the elbow, then the base."""
        self.move_joint2(angles.alpha)
        self.move_joint3(angles.beta)
        self.move_joint1(angles.theta)

    def zero_z_axis(self) -> int:
        """Find the nearest obstacle in one turn and make its direction zero.

        Returns the encoder count at which the obstacle was found.
        """
        min_dist = 255.0
        target = 0
        self.move_joint2(120)
        self.move_joint3(-70)
        self.hardware.reset_encoder()
        self.hardware.set_motor_power(CALIBRATION_POWER)
        while self.hardware.read_encoder() < FULL_ROTATION_EC:
            dist_sum = 0
            current = self.hardware.read_encoder()
            samples = 1
            while abs(current - self.hardware.read_encoder()) <= GEAR_REDUCTION:
                dist_sum += self.hardware.read_ultrasonic()
                samples += 1
            dist_avg = int(dist_sum / samples)
            if dist_avg < min_dist:
                min_dist = dist_avg
                target = current
        self.hardware.set_motor_power(0)
        self.move_joint1(target / GEAR_REDUCTION)
        self.hardware.reset_encoder()
        return target

    def gripper_controller(self, angle: int) -> Optional[bytes]:
        """Set the gripper servo to ``angle``."""
        return self.servos.set_servo_position(S_SERVO, GRIPPER, angle)

    def gripper_balls(self) -> Optional[bytes]:
        """Open the gripper if nothing is seen or the bumper is pressed, else close it."""
        if self.hardware.read_color() == BallColor.NOTHING or self.hardware.read_touch() == 1:
            return self.gripper_controller(GRIPPER_OPEN)
        return self.gripper_controller(GRIPPER_CLOSED)