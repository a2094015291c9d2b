"""Hand skeleton ingestion module."""

from .joints import JointLabel, Joint, JOINT_LABELS, NUM_JOINTS
from .frame_decoder import (
    LandmarkFrameDecoder,
    DecodedFrame,
    JointObservation,
    decode_frame,
    mirror_handedness,
)
from .skeleton import SkeletonStore, Hand, HandSlot, Chirality
from .normalizer import ScaleNormalizer

__all__ = [
    "JointLabel",
    "Joint",
    "JOINT_LABELS",
    "NUM_JOINTS",
    "LandmarkFrameDecoder",
    "DecodedFrame",
    "JointObservation",
    "decode_frame",
    "mirror_handedness",
    "SkeletonStore",
    "Hand",
    "HandSlot",
    "Chirality",
    "ScaleNormalizer",
]
