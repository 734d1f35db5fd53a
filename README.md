# nxtarm

Control logic for a three-joint robotic arm. The arm has a rotating base
(joint 1, a geared motor with an encoder), a servo-driven shoulder (joint 2),
a servo-driven elbow (joint 3) and a servo-driven gripper.

## Modules

- **`nxtarm.fileio`**: whitespace-separated ASCII values. Whitespace is
  space, tab, CR, LF or NUL (`is_whitespace`).
  - `TokenReader` has `read_byte`, `read_char` (skips whitespace),
    `read_text` (one word, at most 20 characters kept), `read_int` and
    `read_float`. The numbers are converted like `atoi` and `atof`: the
    leading number is used, or 0 if there is none (`parse_int`,
    `parse_float`). Reading past the end raises `EOFError`. Iterating over a
    reader yields its words.
  - `TokenWriter` has `write_char`, `write_text`, `write_long`,
    `write_float(number, fmt="%f")` and `write_endl`, which writes CR LF.
  - `open_read(path)` and `open_write(path)` open files. Both objects are
    context managers.
- **`nxtarm.servo`**: builds messages for an I2C servo interface module.
  - `ServoController` has `set_servo_position`, `set_gripper_position`,
    `reset_gripper`, `set_servo_speed`, `set_pulse`, `quick_servo_setup`,
    `set_speed_register` and `battery_voltage`. Positions and speeds are
    clamped to their limits (`clamp`) before they become pulse widths.
  - The position and speed setters return the message sent. They return
    `None` when the port or servo number is invalid (`param_is_valid`:
    ports `SensorPort.S1` to `S4`, servos 1 to 7).
  - `I2CBus` is an in-memory bus. It logs every message in `transactions`
    and stores the data bytes in `registers`.
- **`nxtarm.kinematics`**: the `Point` and `AngleSet` dataclasses and the
  inverse kinematics.
  - `calc_angle_set(point)` gives the shoulder angle `alpha`, the elbow angle
    `beta` and the base angle `theta`, all in degrees. Unreachable geometry
    gives NaN.
  - `validate_point(point)` returns an `AngleSet` whose `is_valid` is true
    only if all of these hold:
    - the point is closer than the arm's reach (`is_within_range`);
    - the point is above the ground (`is_z_value_valid`);
    - alpha lies between 60 and 150 degrees and beta is below
      `calc_max_beta` (`angles_valid`).

    The point's gripper setting and delay are carried over.
  - `read_point(reader)` reads `x y z gripper delay_ms`.
- **`nxtarm.motion`**: the `Arm` class drives the joints through an
  `ArmHardware` and a `ServoController`.
  - `move_joint1` turns the base the shorter way round, with power set by the
    eased ramp `smooth_motion` / `smooth_motion_func`.
  - `move_joint2` and `move_joint3` apply fitted servo curves
    (`joint2_command`, `joint3_command`).
  - `move_robot` moves shoulder, elbow, then base.
  - `zero_z_axis` turns the base once. It makes the direction of the nearest
    ultrasonic reading the new zero.
  - `gripper_balls` opens or closes the gripper from the colour and touch
    readings (`BallColor`).
  - Also provided: `wrap_encoder` and `map_range`, an integer linear mapping
    that truncates toward zero.
- **`nxtarm.runner`**: running programs.
  - `load_program` reads a point program.
  - `batches` splits items into lists of at most 8.
  - `evaluate_points` gives a `PlannedMove` per point.
  - `execute` moves an `Arm` through the reachable moves. It pauses after
    each one and hands unreachable moves to an optional callback.
  - `joystick_targets` turns stick readings into base power and shoulder and
    elbow angles.
  - `write_joystick_info` writes a `JoystickInfo` sample as one line of five
    numbers.

## Point program format

The first value is the number of points, which must be positive. Each point
then takes five values: `x y z gripper delay_ms`. Values are separated by
whitespace:

```
2
100 100 50 0 1000
-150 80 120 0 500
```

## Command line

```
nxtarm program.txt
nxtarm program.txt --wait
```

The program file defaults to `testfile.txt`.

The command loads the program and calibrates a simulated arm. Then it
evaluates the points in batches of 8 and prints one line per point: its
index and coordinates, then either the alpha, beta and theta it moves to, or
`unreachable, skipped`. With `--wait` it sleeps for each point's delay.

A missing file, a non-positive count or a truncated file prints
`ERROR! File: ...` to standard error and exits with status 1.

## Library use

```python
from nxtarm.kinematics import Point, validate_point

angles = validate_point(Point(x=100.0, y=100.0, z=50.0))
if angles.is_valid:
    print(angles.alpha, angles.beta, angles.theta)
```

```python
from nxtarm.motion import Arm, ArmHardware
from nxtarm.servo import I2CBus, ServoController

bus = I2CBus()
arm = Arm(ArmHardware(), ServoController(bus))
arm.move_joint2(90)
print(bus.transactions)
```

## What it does not do

The package does not talk to any real hardware.

- `ArmHardware` simulates the motor, encoder and sensors: the encoder moves
  one count per reading while the motor is powered.
- `I2CBus` only records messages.

To drive a physical arm, subclass them and override their methods
(`read_encoder`, `set_motor_power`, the sensor readings, `I2CBus.send`).

There is no joystick input and no command for recording or replaying
joystick sessions. Only the conversion (`joystick_targets`) and the line
format (`write_joystick_info`) are provided.

## Tests

```
pip install -e .[test]
pytest
```