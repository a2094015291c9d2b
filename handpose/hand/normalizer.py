"""
Scale Normalizer

Derives a per-hand distance normalization factor from the wrist to
middle-knuckle distance so that pose thresholds do not depend on hand
size or distance from the camera.

Usage:
    from handpose.hand.normalizer import ScaleNormalizer

    normalizer = ScaleNormalizer()
    normalizer.update(hand)
"""

from typing import Optional

import numpy as np

from .joints import JointLabel
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)

# Wrist to extended middle fingertip is about twice wrist to middle knuckle
DEFAULT_EXTENT_RATIO = 2.0


class ScaleNormalizer:
    """Updates a hand's normalization factor and orientation vector."""

    def __init__(self, extent_ratio: float = DEFAULT_EXTENT_RATIO):
        """
        Args:
            extent_ratio: Ratio of full hand extent to wrist-knuckle distance
        """
        self.extent_ratio = extent_ratio

    def compute_factor(self, wrist: np.ndarray, middle_knuckle: np.ndarray) -> Optional[float]:
        """
        Compute the normalization factor for one pair of positions.

        Returns:
            1 / (distance * extent_ratio), or None for degenerate geometry
        """
        d = float(np.linalg.norm(middle_knuckle - wrist))
        if d == 0.0 or not np.isfinite(d):
            return None
        max_extent = d * self.extent_ratio
        return 1.0 / max_extent

    @staticmethod
    def compute_orientation(wrist: np.ndarray, middle_knuckle: np.ndarray) -> Optional[np.ndarray]:
        """
        Unit vector normal to the plane spanned by the two position vectors.

        Both vectors are measured from the coordinate origin, not from
        each other.

        Returns:
            (3,) unit vector, or None when the cross product vanishes
        """
        normal = np.cross(wrist, middle_knuckle)
        length = np.linalg.norm(normal)
        if length == 0.0 or not np.isfinite(length):
            return None
        return normal / length

    def update(self, hand) -> bool:
        """
        Update the hand from the wrist and middle knuckle of the latest frame.

        Missing joints or coincident positions leave the prior factor and
        orientation in place.

        Args:
            hand: Hand to update in place

        Returns:
            True if the normalization factor was updated
        """
        if not (hand.in_current_frame(JointLabel.WRIST)
                and hand.in_current_frame(JointLabel.MIDDLE_KNUCKLE)):
            return False

        wrist = hand.position(JointLabel.WRIST)
        knuckle = hand.position(JointLabel.MIDDLE_KNUCKLE)

        factor = self.compute_factor(wrist, knuckle)
        if factor is None:
            logger.debug("Wrist and middle knuckle coincide, keeping previous scale")
            return False

        hand.normalization_factor = factor

        orientation = self.compute_orientation(wrist, knuckle)
        if orientation is not None:
            hand.orientation = orientation

        return True
