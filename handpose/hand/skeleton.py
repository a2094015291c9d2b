"""
Skeleton Store

Holds the two tracked hands (left and right slots) and applies decoded
frames to them in place.

Usage:
    from handpose.hand.skeleton import SkeletonStore

    store = SkeletonStore()
    store.apply_frame(decoded_frame)
    wrist = store.left.joint(JointLabel.WRIST)
"""

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Set
from dataclasses import dataclass, field

import numpy as np

from .joints import JOINT_LABELS, NUM_JOINTS, Joint, JointLabel
from .frame_decoder import DecodedFrame
from ..pose.poses import Pose

DEFAULT_CLOSE_THRESHOLD = 0.31
DEFAULT_APART_THRESHOLD = 0.75


class Chirality(str, Enum):
    """Which physical hand a record represents."""
    LEFT = 'Left'
    RIGHT = 'Right'
    UNKNOWN = 'Unknown'


class HandSlot(str, Enum):
    """Storage slot of a hand. Frame hand 0 fills LEFT, hand 1 fills RIGHT."""
    LEFT = 'left'
    RIGHT = 'right'

    @property
    def hand_index(self) -> int:
        return 0 if self is HandSlot.LEFT else 1

    @classmethod
    def from_hand_index(cls, hand_index: int) -> Optional['HandSlot']:
        if hand_index == 0:
            return cls.LEFT
        if hand_index == 1:
            return cls.RIGHT
        return None


def _placeholder_joints() -> List[Joint]:
    return [Joint(label) for label in JOINT_LABELS]


@dataclass(eq=False)
class Hand:
    """Skeletal state of one hand. Compare hands through snapshot()."""
    chirality: str = Chirality.UNKNOWN.value
    joints: List[Joint] = field(default_factory=_placeholder_joints)
    pose: Pose = Pose.UNKNOWN
    normalization_factor: float = 1.0
    close_threshold: float = DEFAULT_CLOSE_THRESHOLD
    apart_threshold: float = DEFAULT_APART_THRESHOLD
    orientation: Optional[np.ndarray] = None
    observed: Set[int] = field(default_factory=set)  # ever received a landmark
    present_this_frame: Set[int] = field(default_factory=set)

    def joint(self, label: JointLabel) -> Joint:
        """Get a joint by label via its fixed index."""
        index = label.landmark_index
        if index < 0:
            raise KeyError(f"No joint slot for label {label!r}")
        return self.joints[index]

    def has_joint(self, label: JointLabel) -> bool:
        """Whether the joint has ever been observed."""
        return label.landmark_index in self.observed

    def in_current_frame(self, label: JointLabel) -> bool:
        """Whether the joint was delivered by the latest frame."""
        return label.landmark_index in self.present_this_frame

    def position(self, label: JointLabel) -> np.ndarray:
        """Get joint position as a (3,) array."""
        return self.joint(label).position

    def positions(self) -> np.ndarray:
        """Get all joint positions. Shape (21, 3)."""
        return np.array([[j.x, j.y, j.z] for j in self.joints], dtype=np.float64)

    def set_joint(self, index: int, x: float, y: float, z: float):
        """Overwrite one joint position; the label stays fixed by index."""
        self.joints[index] = self.joints[index].moved_to(x, y, z)
        self.observed.add(index)
        self.present_this_frame.add(index)

    def snapshot(self) -> Dict[str, Any]:
        """Plain copy of the hand state, comparable with ==."""
        return {
            'chirality': self.chirality,
            'joints': [(j.label, j.x, j.y, j.z) for j in self.joints],
            'pose': self.pose,
            'normalization_factor': self.normalization_factor,
            'close_threshold': self.close_threshold,
            'apart_threshold': self.apart_threshold,
            'orientation': None if self.orientation is None else tuple(self.orientation.tolist()),
            'observed': frozenset(self.observed),
            'present_this_frame': frozenset(self.present_this_frame),
        }


class SkeletonStore:
    """
    Owns exactly two Hand records for the session.

    Joints are mutated in place once per applied frame. Hands missing from
    a frame keep their last known joints and pose.
    """

    def __init__(
        self,
        close_threshold: float = DEFAULT_CLOSE_THRESHOLD,
        apart_threshold: float = DEFAULT_APART_THRESHOLD
    ):
        """
        Args:
            close_threshold: Normalized distance below which tips count as together
            apart_threshold: Normalized distance above which tips count as extended
        """
        self.close_threshold = close_threshold
        self.apart_threshold = apart_threshold
        self.reset()

    def reset(self):
        """Re-create both hands with placeholder joints."""
        self._hands: Dict[HandSlot, Hand] = {
            slot: Hand(
                close_threshold=self.close_threshold,
                apart_threshold=self.apart_threshold
            )
            for slot in HandSlot
        }

    @property
    def left(self) -> Hand:
        return self._hands[HandSlot.LEFT]

    @property
    def right(self) -> Hand:
        return self._hands[HandSlot.RIGHT]

    def hand(self, slot: HandSlot) -> Hand:
        """Get the hand stored in a slot."""
        return self._hands[HandSlot(slot)]

    def slots(self) -> Iterator[HandSlot]:
        """Iterate slots in storage order (left, right)."""
        return iter(HandSlot)

    def items(self):
        """Iterate (slot, hand) pairs in storage order."""
        return ((slot, self._hands[slot]) for slot in HandSlot)

    def apply_frame(self, frame: DecodedFrame) -> List[HandSlot]:
        """
        Apply a decoded frame to the hand slots.

        Args:
            frame: Decoded frame

        Returns:
            Slots that were present in the frame
        """
        touched = []
        for hand_index in frame.hands_present():
            slot = HandSlot.from_hand_index(hand_index)
            if slot is None:
                continue
            touched.append(slot)

        for slot, hand in self.items():
            hand.present_this_frame = set()

        for slot in touched:
            hand = self._hands[slot]
            label = frame.handedness[slot.hand_index] if slot.hand_index < len(frame.handedness) else None
            hand.chirality = label if label is not None else Chirality.UNKNOWN.value

        for obs in frame.joints:
            slot = HandSlot.from_hand_index(obs.hand_index)
            if slot is None or not 0 <= obs.joint_index < NUM_JOINTS:
                continue
            self._hands[slot].set_joint(obs.joint_index, obs.x, obs.y, obs.z)

        return touched

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """Plain copy of both hands, comparable with ==."""
        return {slot.value: hand.snapshot() for slot, hand in self.items()}
