"""Static pose classification module."""

from .poses import Pose
from .classifier import PoseClassifier

__all__ = [
    "Pose",
    "PoseClassifier",
]
