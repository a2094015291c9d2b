"""Shared fixtures for hand pose tests."""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

WRIST = 0
INDEX_TIP = 8
MIDDLE_KNUCKLE = 9
MIDDLE_TIP = 12
RING_TIP = 16
LITTLE_TIP = 20


def build_hand(points, offset=(0.0, 0.0, 0.0), scale=1.0, num_joints=21):
    """Build 21 joint records; unspecified joints sit at the wrist."""
    wrist = points.get(WRIST, (0.0, 0.0, 0.0))
    records = []
    for i in range(num_joints):
        x, y, z = points.get(i, wrist)
        records.append({
            'x': x * scale + offset[0],
            'y': y * scale + offset[1],
            'z': z * scale + offset[2],
        })
    return records


@pytest.fixture
def make_payload():
    """Factory for frame payloads from per-hand point dicts."""
    def _make(*hands, labels=None, offset=(0.0, 0.0, 0.0), scale=1.0):
        payload = {
            'landmarks': [build_hand(points, offset=offset, scale=scale) for points in hands]
        }
        if labels is not None:
            payload['handednesses'] = [{'displayName': label} for label in labels]
        return payload
    return _make


@pytest.fixture
def fist_points():
    """Curled fingers close to the wrist (normalization factor 1/0.30)."""
    return {
        WRIST: (0.0, 0.0, 0.0),
        LITTLE_TIP: (0.05, 0.0, 0.0),
        RING_TIP: (0.06, 0.0, 0.0),
        MIDDLE_TIP: (0.07, 0.0, 0.0),
        INDEX_TIP: (0.08, 0.0, 0.0),
        MIDDLE_KNUCKLE: (0.0, 0.15, 0.0),
    }


@pytest.fixture
def open_palm_points():
    """All tracked fingertips 0.30 from the wrist."""
    return {
        WRIST: (0.0, 0.0, 0.0),
        INDEX_TIP: (0.3, 0.0, 0.0),
        MIDDLE_TIP: (0.0, 0.3, 0.0),
        RING_TIP: (-0.3, 0.0, 0.0),
        LITTLE_TIP: (0.0, -0.3, 0.0),
        MIDDLE_KNUCKLE: (0.0, 0.15, 0.0),
    }


@pytest.fixture
def peace_points():
    """Index and middle extended, ring and little folded."""
    return {
        WRIST: (0.0, 0.0, 0.0),
        INDEX_TIP: (0.3, 0.0, 0.0),
        MIDDLE_TIP: (0.0, 0.3, 0.0),
        RING_TIP: (0.1, 0.0, 0.0),
        LITTLE_TIP: (0.15, 0.0, 0.0),
        MIDDLE_KNUCKLE: (0.0, 0.15, 0.0),
    }


@pytest.fixture
def pointing_points():
    """Index extended, other fingertips bunched near the wrist."""
    return {
        WRIST: (0.0, 0.0, 0.0),
        INDEX_TIP: (0.3, 0.0, 0.0),
        MIDDLE_TIP: (0.05, 0.02, 0.0),
        RING_TIP: (0.05, 0.0, 0.0),
        LITTLE_TIP: (0.04, 0.0, 0.0),
        MIDDLE_KNUCKLE: (0.0, 0.15, 0.0),
    }


@pytest.fixture
def middle_finger_points():
    """Middle finger extended, other fingertips bunched near the wrist."""
    return {
        WRIST: (0.0, 0.0, 0.0),
        MIDDLE_TIP: (0.0, 0.3, 0.0),
        INDEX_TIP: (0.05, 0.01, 0.0),
        RING_TIP: (0.05, 0.0, 0.0),
        LITTLE_TIP: (0.04, 0.0, 0.0),
        MIDDLE_KNUCKLE: (0.0, 0.15, 0.0),
    }


@pytest.fixture
def ambiguous_points():
    """Three fingers extended, little finger half way: matches no rule."""
    return {
        WRIST: (0.0, 0.0, 0.0),
        INDEX_TIP: (0.3, 0.0, 0.0),
        MIDDLE_TIP: (0.0, 0.3, 0.0),
        RING_TIP: (-0.3, 0.0, 0.0),
        LITTLE_TIP: (0.0, -0.15, 0.0),
        MIDDLE_KNUCKLE: (0.0, 0.15, 0.0),
    }
