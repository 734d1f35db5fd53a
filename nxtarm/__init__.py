"""Token file I/O, servo messages, inverse kinematics and simulated motion control for a three-joint arm."""

__version__ = "0.2.0"
__all__ = ["fileio", "servo", "kinematics", "motion", "runner"]