"""
Hand Joint Definitions

Fixed 21-keypoint hand layout delivered by the upstream tracker.

Keypoint Structure:
    0: Wrist
    1-4: Thumb (knuckle, intermediate base, intermediate tip, tip)
    5-8: Index (knuckle, intermediate base, intermediate tip, tip)
    9-12: Middle (knuckle, intermediate base, intermediate tip, tip)
    13-16: Ring (knuckle, intermediate base, intermediate tip, tip)
    17-20: Little (knuckle, intermediate base, intermediate tip, tip)

Usage:
    from handpose.hand.joints import JointLabel, Joint

    label = JointLabel.from_index(8)   # JointLabel.INDEX_TIP
    joint = Joint(label, 0.1, 0.2, 0.0)
"""

from enum import Enum
from typing import Tuple
from dataclasses import dataclass

import numpy as np


NUM_JOINTS = 21


class JointLabel(str, Enum):
    """Named skeletal location on a hand."""
    WRIST = 'wrist'
    THUMB_KNUCKLE = 'thumb_knuckle'
    THUMB_INTERMEDIATE_BASE = 'thumb_intermediate_base'
    THUMB_INTERMEDIATE_TIP = 'thumb_intermediate_tip'
    THUMB_TIP = 'thumb_tip'
    INDEX_KNUCKLE = 'index_finger_knuckle'
    INDEX_INTERMEDIATE_BASE = 'index_finger_intermediate_base'
    INDEX_INTERMEDIATE_TIP = 'index_finger_intermediate_tip'
    INDEX_TIP = 'index_finger_tip'
    MIDDLE_KNUCKLE = 'middle_finger_knuckle'
    MIDDLE_INTERMEDIATE_BASE = 'middle_finger_intermediate_base'
    MIDDLE_INTERMEDIATE_TIP = 'middle_finger_intermediate_tip'
    MIDDLE_TIP = 'middle_finger_tip'
    RING_KNUCKLE = 'ring_finger_knuckle'
    RING_INTERMEDIATE_BASE = 'ring_finger_intermediate_base'
    RING_INTERMEDIATE_TIP = 'ring_finger_intermediate_tip'
    RING_TIP = 'ring_finger_tip'
    LITTLE_KNUCKLE = 'little_finger_knuckle'
    LITTLE_INTERMEDIATE_BASE = 'little_finger_intermediate_base'
    LITTLE_INTERMEDIATE_TIP = 'little_finger_intermediate_tip'
    LITTLE_TIP = 'little_finger_tip'
    UNKNOWN = 'unknown'

    @classmethod
    def from_index(cls, index: int) -> 'JointLabel':
        """
        Map a landmark index to its label.

        Args:
            index: Landmark index as delivered by the tracker

        Returns:
            Label for indices 0-20, UNKNOWN for anything else
        """
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
            return cls.UNKNOWN
        if 0 <= index < NUM_JOINTS:
            return JOINT_LABELS[int(index)]
        return cls.UNKNOWN

    @property
    def landmark_index(self) -> int:
        """Landmark index of this label (-1 for UNKNOWN)."""
        return _INDEX_BY_LABEL.get(self, -1)


# Insertion order is landmark order
JOINT_LABELS: Tuple[JointLabel, ...] = tuple(
    label for label in JointLabel if label is not JointLabel.UNKNOWN
)

_INDEX_BY_LABEL = {label: i for i, label in enumerate(JOINT_LABELS)}

FINGERTIP_LABELS = (
    JointLabel.THUMB_TIP,
    JointLabel.INDEX_TIP,
    JointLabel.MIDDLE_TIP,
    JointLabel.RING_TIP,
    JointLabel.LITTLE_TIP,
)


@dataclass(frozen=True)
class Joint:
    """A labelled 3D position for one frame."""
    label: JointLabel
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @property
    def position(self) -> np.ndarray:
        """Get position as a (3,) array."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def moved_to(self, x: float, y: float, z: float) -> 'Joint':
        """Return a new joint with the same label at another position."""
        return Joint(self.label, float(x), float(y), float(z))
