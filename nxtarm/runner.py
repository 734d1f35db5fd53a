"""Running point programs on the arm and recording joystick sessions.

A program file starts with the number of points, followed by one record
per point: x, y, z (mm), gripper position and a pause in milliseconds,
all separated by whitespace.
"""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple, TypeVar

from nxtarm.fileio import TokenReader, TokenWriter, open_read
from nxtarm.kinematics import BATCH_SIZE, AngleSet, Point, read_point, validate_point
from nxtarm.motion import Arm, ArmHardware
from nxtarm.servo import I2CBus, ServoController

# Full deflection of a joystick axis
STICK_RANGE = 128.0
# Base motor power at full deflection
STICK_MOTOR_POWER = 70
# Servo angle at full deflection
STICK_SERVO_ANGLE = 90

DEFAULT_PROGRAM = "testfile.txt"

T = TypeVar("T")


@dataclass
class JoystickInfo:
    """One sample of the joint settings made with the joystick."""

    j1_ec: int = 0
    j1_speed: int = 0
    j2_ang: int = 0
    j3_ang: int = 0
    gp_ang: int = 0


@dataclass
class PlannedMove:
    """A point of the program together with the joint angles that reach it."""

    point: Point
    angles: AngleSet

    @property
    def is_valid(self) -> bool:
        return self.angles.is_valid

    @property
    def delay_seconds(self) -> float:
        return self.angles.t_ms_delay / 1000.0


def write_joystick_info(writer: TokenWriter, info: JoystickInfo) -> None:
    """Write one sample as a line of five numbers separated by two spaces."""
    values = (info.j1_ec, info.j1_speed, info.j2_ang, info.j3_ang, info.gp_ang)
    for position, value in enumerate(values):
        if position:
            writer.write_text("  ")
        writer.write_long(value)
    writer.write_endl()


def load_program(reader: TokenReader) -> List[Point]:
    """Read the point count and then that many points from ``reader``.

    Raises ValueError if the count is not positive and EOFError if the
    file ends before all points are read.
    """
    quantity = reader.read_int()
    if quantity <= 0:
        raise ValueError(f"a program needs at least one point, not {quantity}")
    return [read_point(reader) for _ in range(quantity)]


def batches(points: Iterable[T], size: int = BATCH_SIZE) -> Iterator[List[T]]:
    """Yield successive lists of at most ``size`` items."""
    if size <= 0:
        raise ValueError("batch size must be positive")
    batch: List[T] = []
    for item in points:
        batch.append(item)
        if len(batch) == size:
            yield batch
            batch = []
    if batch:
        yield batch


def evaluate_points(points: Iterable[Point]) -> List[PlannedMove]:
    """Compute the joint angles of every point and mark whether it is reachable."""
    moves = []
    for point in points:
        angles = validate_point(point)
        moves.append(PlannedMove(replace(point, is_valid=angles.is_valid), angles))
    return moves


def execute(
    arm: Arm,
    moves: Iterable[PlannedMove],
    on_invalid: Optional[Callable[[PlannedMove], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Move the arm through the reachable moves, pausing after each.

    Unreachable moves are handed to ``on_invalid`` and skipped. Returns the
    number of moves carried out.
    """
    done = 0
    for move in moves:
        if move.is_valid:
            arm.move_robot(move.angles)
            sleep(move.delay_seconds)
            done += 1
        elif on_invalid is not None:
            on_invalid(move)
    return done


def joystick_targets(x1: float, y1: float, x2: float) -> Tuple[int, float, float]:
    """Convert stick readings to base motor power, shoulder and elbow angles."""
    power = int(x2 / STICK_RANGE * STICK_MOTOR_POWER)
    alpha = -(y1 / STICK_RANGE * STICK_SERVO_ANGLE)
    beta = x1 / STICK_RANGE * STICK_SERVO_ANGLE
    return power, alpha, beta


def _describe(index: int, move: PlannedMove) -> str:
    point = move.point
    where = f"{index}: x={point.x:f} y={point.y:f} z={point.z:f}"
    if not move.is_valid:
        return f"{where} unreachable, skipped"
    angles = move.angles
    return (
        f"{where} alpha={angles.alpha:.2f} beta={angles.beta:.2f} "
        f"theta={angles.theta:.2f}"
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run a point program on a simulated arm and report every move."""
    parser = argparse.ArgumentParser(
        prog="nxtarm", description="Move the arm through the points of a program file."
    )
    parser.add_argument("program", nargs="?", default=DEFAULT_PROGRAM)
    parser.add_argument(
        "--wait", action="store_true", help="pause for each point's delay"
    )
    args = parser.parse_args(argv)

    try:
        with open_read(args.program) as reader:
            points = load_program(reader)
    except (OSError, ValueError, EOFError) as error:
        print(f"ERROR! File: {error}", file=sys.stderr)
        return 1

    arm = Arm(ArmHardware(), ServoController(I2CBus()))
    arm.zero_z_axis()
    arm.gripper_balls()
    sleep: Callable[[float], None] = time.sleep if args.wait else (lambda _seconds: None)

    index = 0
    for batch in batches(points, BATCH_SIZE):
        for move in evaluate_points(batch):
            print(_describe(index, move))
            execute(arm, [move], sleep=sleep)
            index += 1
    return 0


if __name__ == "__main__":
    sys.exit(main())