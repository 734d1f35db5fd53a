"""Control of hobby servos through an I2C servo interface module.

Standard servos are positioned by angle and continuous servos by speed. Both
are driven by a pulse width in microseconds, which the interface takes in
units of 10 us through its quick-setup registers.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

# Interface registers
SPEED_REGISTER = 0x52
LOW_BYTE_REGISTER = 0x42
HIGH_BYTE_REGISTER = 0x43
BATTERY_REGISTER = 0x41
QUICK_SETUP_BASE = 0x59
CONTROL_REG_ADDR = 0x41

# Millivolts per unit of the battery register (4700 mV supply / 128).
BATTERY_MV_PER_UNIT = 37

# Available servo numbers; servo 8 supplies power.
MIN_SERVO_NUM = 1
MAX_SERVO_NUM = 7

# Continuous servos
MAX_SERVO_SPEED = 100
SERVO_NEUTRAL = 1550

# Standard servo position limits, in degrees
MIN_SERVO_ANGLE = 0
MAX_SERVO_ANGLE = 180
SERVO_OFFSET = 90
SERVO_ZERO = 600
MIN_GRIP_ANGLE = 50
MAX_GRIP_ANGLE = 120

# Factory-set I2C address of the interface
I2C_ADDR = 0xB0


class SensorPort(enum.IntEnum):
    """The four sensor ports of the brick."""

    S1 = 0
    S2 = 1
    S3 = 2
    S4 = 3


@dataclass
class I2CBus:
    """An I2C bus holding the registers of the devices attached to it.

    Every transaction is logged in ``transactions`` as ``(port, message)``.
    A message is the device address, the first register and any data bytes;
    data bytes are stored in consecutive registers. The reply holds
    ``reply_length`` bytes read from consecutive registers starting at the
    addressed one (unset registers read as 0).
    """

    registers: Dict[Tuple[int, int, int], int] = field(default_factory=dict)
    transactions: List[Tuple[SensorPort, bytes]] = field(default_factory=list)

    def send(self, port: SensorPort, message: bytes, reply_length: int = 0) -> bytes:
        """Send ``message`` on ``port`` and return the device's reply."""
        message = bytes(message)
        if len(message) < 2:
            raise ValueError("an I2C message needs an address and a register")
        if reply_length < 0:
            raise ValueError("reply length cannot be negative")
        port = SensorPort(port)
        self.transactions.append((port, message))
        address, register, data = message[0], message[1], message[2:]
        for offset, value in enumerate(data):
            self.registers[(port, address, register + offset)] = value
        return bytes(
            self.registers.get((port, address, register + offset), 0)
            for offset in range(reply_length)
        )


def clamp(setting: int, minimum: int, maximum: int) -> int:
    """Limit ``setting`` to the range from ``minimum`` to ``maximum``."""
    if setting > maximum:
        return maximum
    if setting < minimum:
        return minimum
    return setting


def param_is_valid(port: object, servo_number: int) -> bool:
    """True if ``port`` is a sensor port and ``servo_number`` is 1 to 7."""
    try:
        SensorPort(port)
    except (ValueError, TypeError):
        return False
    return MIN_SERVO_NUM <= servo_number <= MAX_SERVO_NUM


def _truncate(value: float) -> int:
    return int(value)


def _div_toward_zero(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return quotient if value >= 0 else -quotient


class ServoController:
    """Drives the servos of one interface module."""

    def __init__(self, bus: I2CBus, address: int = I2C_ADDR) -> None:
        self.bus = bus
        self.address = address

    def battery_voltage(self, port: SensorPort) -> int:
        """Return the module's supply voltage in millivolts."""
        reply = self.bus.send(port, bytes([self.address, BATTERY_REGISTER]), 1)
        return BATTERY_MV_PER_UNIT * (reply[0] & 0xFF)

    def quick_servo_setup(self, port: SensorPort, servo_number: int, position: int) -> bytes:
        """Write ``position`` (pulse in units of 10 us) to a quick-setup register."""
        message = bytes(
            [self.address, (QUICK_SETUP_BASE + servo_number) & 0xFF, position & 0xFF]
        )
        self.bus.send(port, message, 0)
        return message

    def set_speed_register(self, port: SensorPort, servo_number: int, speed: int) -> bytes:
        """Write the speed register of a servo: 0 is fastest, 255 slowest."""
        message = bytes(
            [self.address, (SPEED_REGISTER + servo_number - 1) & 0xFF, speed & 0xFF]
        )
        self.bus.send(port, message, 0)
        return message

    def set_pulse(self, port: SensorPort, servo_number: int, pulse_us: int) -> bytes:
        """Send a pulse width in microseconds to a servo."""
        return self.quick_servo_setup(
            port, servo_number, _div_toward_zero(_truncate(pulse_us), 10)
        )

    def set_servo_speed(
        self,
        port: SensorPort,
        servo_number: int,
        speed: int,
        neg_offset: int = 0,
        pos_offset: int = 0,
    ) -> Optional[bytes]:
        """Run a continuous servo at ``speed`` (-100 to 100).

        Returns the message sent, or None if the port or servo is invalid.
        """
        if not param_is_valid(port, servo_number):
            return None
        speed = clamp(_truncate(speed), -MAX_SERVO_SPEED, MAX_SERVO_SPEED)
        if speed == 0:
            pulse = SERVO_NEUTRAL
        elif speed > 0:
            pulse = SERVO_NEUTRAL + (speed + pos_offset) * 4
        else:
            pulse = SERVO_NEUTRAL + (speed + neg_offset) * 4
        return self.set_pulse(port, servo_number, pulse)

    def set_servo_position(
        self, port: SensorPort, servo_number: int, position: float
    ) -> Optional[bytes]:
        """Turn a standard servo to ``position`` degrees (-90 to 90, 0 neutral).

        Returns the message sent, or None if the port or servo is invalid.
        """
        if not param_is_valid(port, servo_number):
            return None
        angle = clamp(_truncate(position) + SERVO_OFFSET, MIN_SERVO_ANGLE, MAX_SERVO_ANGLE)
        return self.set_pulse(port, servo_number, SERVO_ZERO + angle * 10)

    def set_gripper_position(
        self, port: SensorPort, servo_number: int, position: float
    ) -> Optional[bytes]:
        """Open the gripper to ``position`` (0 to 70).

        Returns the message sent, or None if the port or servo is invalid.
        """
        if not param_is_valid(port, servo_number):
            return None
        angle = clamp(_truncate(position) + MIN_GRIP_ANGLE, MIN_GRIP_ANGLE, MAX_GRIP_ANGLE)
        return self.set_pulse(port, servo_number, SERVO_ZERO + angle * 10)

    def reset_gripper(self, port: SensorPort, servo_number: int) -> Optional[bytes]:
        """Move the gripper to its 90 degree rest position."""
        return self.set_gripper_position(port, servo_number, 90 - MIN_GRIP_ANGLE)