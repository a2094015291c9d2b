"""
Static Pose Classifier

Classifies a hand's current configuration from fingertip-to-wrist and
fingertip-to-fingertip distances, scaled by the hand's normalization
factor so the rules are independent of hand size and camera distance.

Rules are evaluated in priority order, first match wins:
    1. Peace sign
    2. Pointing
    3. Extended middle finger
    4. Fist
    5. Open palm

Usage:
    from handpose.pose.classifier import PoseClassifier

    classifier = PoseClassifier()
    pose = classifier.classify(hand)
"""

from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

import numpy as np

from .poses import Pose
from ..hand.joints import JointLabel

if TYPE_CHECKING:
    from ..hand.skeleton import Hand


# Pairs measured for every classification: name -> (joint_a, joint_b)
DISTANCE_PAIRS: Dict[str, Tuple[JointLabel, JointLabel]] = {
    'wrist_index': (JointLabel.WRIST, JointLabel.INDEX_TIP),
    'wrist_middle': (JointLabel.WRIST, JointLabel.MIDDLE_TIP),
    'wrist_ring': (JointLabel.WRIST, JointLabel.RING_TIP),
    'wrist_little': (JointLabel.WRIST, JointLabel.LITTLE_TIP),
    'little_ring': (JointLabel.LITTLE_TIP, JointLabel.RING_TIP),
    'ring_middle': (JointLabel.RING_TIP, JointLabel.MIDDLE_TIP),
    'middle_index': (JointLabel.MIDDLE_TIP, JointLabel.INDEX_TIP),
    'little_index': (JointLabel.LITTLE_TIP, JointLabel.INDEX_TIP),
}


class PoseClassifier:
    """
    Stateless rule-based pose classifier.

    Thresholds are read from each Hand (close_threshold, apart_threshold)
    and compared against normalized distances.
    """

    REQUIRED_JOINTS = (
        JointLabel.WRIST,
        JointLabel.LITTLE_TIP,
        JointLabel.RING_TIP,
        JointLabel.INDEX_TIP,
        JointLabel.MIDDLE_TIP,
    )

    def __init__(self):
        self._rules: List[Tuple[Pose, Callable[[Dict[str, float], float, float], bool]]] = [
            (Pose.PEACE, self._is_peace),
            (Pose.POINTING, self._is_pointing),
            (Pose.MIDDLE_FINGER, self._is_middle_finger),
            (Pose.FIST, self._is_fist),
            (Pose.OPEN_PALM, self._is_open_palm),
        ]

    @property
    def priority(self) -> List[Pose]:
        """Poses in evaluation order."""
        return [pose for pose, _ in self._rules]

    def has_required_joints(self, hand: 'Hand') -> bool:
        return all(hand.has_joint(label) for label in self.REQUIRED_JOINTS)

    def distances(self, hand: 'Hand') -> Optional[Dict[str, float]]:
        """
        Compute normalized pairwise distances used by the rules.

        Args:
            hand: Hand to measure

        Returns:
            Dict mapping pair name to scaled distance, or None if a
            required joint is missing
        """
        if not self.has_required_joints(hand):
            return None

        factor = hand.normalization_factor
        result = {}
        for name, (a, b) in DISTANCE_PAIRS.items():
            dist = np.linalg.norm(hand.position(a) - hand.position(b))
            result[name] = float(dist) * factor
        return result

    def classify(self, hand: 'Hand') -> Pose:
        """
        Classify the hand's current pose.

        Args:
            hand: Hand with current joints and normalization factor

        Returns:
            First matching Pose, or Pose.UNKNOWN
        """
        dist = self.distances(hand)
        if dist is None:
            return Pose.UNKNOWN

        close = hand.close_threshold
        apart = hand.apart_threshold

        for pose, rule in self._rules:
            if rule(dist, close, apart):
                return pose
        return Pose.UNKNOWN

    def update(self, hand: 'Hand') -> Pose:
        """Classify and store the result on the hand."""
        hand.pose = self.classify(hand)
        return hand.pose

    @staticmethod
    def _is_peace(d: Dict[str, float], close: float, apart: float) -> bool:
        # Folded fingers are bounded by the apart threshold here, not close
        return (
            d['wrist_index'] >= apart
            and d['wrist_middle'] >= apart
            and d['wrist_little'] <= apart
            and d['wrist_ring'] <= apart
        )

    @staticmethod
    def _is_pointing(d: Dict[str, float], close: float, apart: float) -> bool:
        return (
            d['wrist_index'] >= apart
            and d['wrist_little'] <= close
            and d['little_ring'] <= close
            and d['ring_middle'] <= close
        )

    @staticmethod
    def _is_middle_finger(d: Dict[str, float], close: float, apart: float) -> bool:
        return (
            d['wrist_middle'] >= apart
            and d['wrist_little'] <= close
            and d['little_ring'] <= close
            and d['little_index'] <= close
        )

    @staticmethod
    def _is_fist(d: Dict[str, float], close: float, apart: float) -> bool:
        return (
            d['wrist_little'] <= close
            and d['little_ring'] <= close
            and d['middle_index'] <= close
            and d['ring_middle'] <= close
        )

    @staticmethod
    def _is_open_palm(d: Dict[str, float], close: float, apart: float) -> bool:
        return (
            d['wrist_index'] >= apart
            and d['wrist_middle'] >= apart
            and d['wrist_little'] >= apart
            and d['wrist_ring'] >= apart
        )
