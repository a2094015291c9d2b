"""
Hand Pose Package

Ingests per-frame hand landmarks from an external tracker and classifies
each hand's static pose.
"""

__version__ = "1.0.0"

from . import hand
from . import pose
from . import render
from . import utils
