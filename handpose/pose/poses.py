"""Static hand pose vocabulary."""

from enum import Enum


class Pose(str, Enum):
    """Discrete classification of a hand's current static configuration."""
    OPEN_PALM = 'open_palm'
    FIST = 'fist'
    POINTING = 'pointing'
    PEACE = 'peace'
    MIDDLE_FINGER = 'middle_finger'
    UNKNOWN = 'unknown'
