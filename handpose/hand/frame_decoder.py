"""
Landmark Frame Decoder

Parses one tracker frame payload into per-joint observations and
per-hand handedness labels.

Payload Structure:
    {
        "handednesses": [{"displayName": "Left"}, ...],
        "landmarks": [[{"x": 0.1, "y": 0.2, "z": 0.0}, ... up to 21], ... up to 2]
    }

The bare list form ``[[{x, y, z}, ...], ...]`` (landmarks only) is also
accepted.

Usage:
    from handpose.hand.frame_decoder import LandmarkFrameDecoder

    decoder = LandmarkFrameDecoder()
    frame = decoder.decode(raw_bytes)
"""

import json
import math
import numbers
from typing import Any, Dict, List, Optional, Union
from dataclasses import dataclass, field

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .joints import NUM_JOINTS
from ..exceptions import FrameDecodeError
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)

Payload = Union[bytes, bytearray, str, Dict[str, Any], List[Any]]

# The tracker reports handedness as seen in a mirror
_MIRRORED_LABELS = {'Left': 'Right', 'Right': 'Left'}


def _coerce_coordinate(value: Any) -> float:
    """Coerce one coordinate field to a finite float, 0.0 when malformed."""
    if isinstance(value, bool):
        return 0.0
    # numpy scalars register as numbers.Real
    if isinstance(value, (numbers.Real, str)):
        try:
            result = float(value)
        except (OverflowError, ValueError):
            logger.debug(f"Coordinate of type {type(value).__name__} not representable as float, replaced with 0.0")
            return 0.0
    else:
        if value is not None:
            logger.debug(f"Unsupported coordinate type {type(value).__name__} replaced with 0.0")
        return 0.0

    if not math.isfinite(result):
        return 0.0
    return result


class JointRecord(BaseModel):
    """One landmark record. Absent or malformed axes decode as 0.0."""
    model_config = ConfigDict(extra='ignore')

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @field_validator('x', 'y', 'z', mode='before')
    @classmethod
    def _tolerant_axis(cls, value: Any) -> float:
        return _coerce_coordinate(value)


class HandednessRecord(BaseModel):
    """Handedness classification for one detected hand."""
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    display_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices('displayName', 'display_name', 'label', 'categoryName'),
    )

    @field_validator('display_name', mode='before')
    @classmethod
    def _string_or_none(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None


class LandmarkPayload(BaseModel):
    """Schema for one frame payload."""
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    landmarks: List[List[JointRecord]]
    handednesses: List[Optional[HandednessRecord]] = Field(
        default_factory=list,
        validation_alias=AliasChoices('handednesses', 'handedness'),
    )

    @field_validator('handednesses', mode='before')
    @classmethod
    def _tolerant_handedness(cls, value: Any) -> List[Any]:
        # Handedness is advisory; bad records drop the label, not the frame
        if not isinstance(value, list):
            return []
        records = []
        for entry in value:
            # MediaPipe nests categories per hand: [[{displayName, score}], ...]
            if isinstance(entry, list):
                entry = entry[0] if entry else None
            records.append(entry if isinstance(entry, dict) else None)
        return records


@dataclass(frozen=True)
class JointObservation:
    """One decoded joint coordinate triple."""
    hand_index: int
    joint_index: int
    x: float
    y: float
    z: float


@dataclass
class DecodedFrame:
    """Structured result of decoding one frame payload."""
    joints: List[JointObservation] = field(default_factory=list)
    handedness: List[Optional[str]] = field(default_factory=list)
    hand_count: int = 0

    def hands_present(self) -> List[int]:
        """Get indices of hands carried by this frame."""
        return list(range(self.hand_count))

    def joints_for(self, hand_index: int) -> List[JointObservation]:
        """Get observations belonging to one hand, in landmark order."""
        return [obs for obs in self.joints if obs.hand_index == hand_index]


def mirror_handedness(label: Optional[str]) -> Optional[str]:
    """
    Correct the tracker's mirrored handedness label.

    Args:
        label: Label reported upstream ('Left', 'Right' or anything else)

    Returns:
        'Right' for 'Left', 'Left' for 'Right', other labels unchanged
    """
    if label is None:
        return None
    return _MIRRORED_LABELS.get(label, label)


class LandmarkFrameDecoder:
    """
    Decodes raw tracker payloads into DecodedFrame objects.

    Shape errors (not a list of hands of joint records) raise
    FrameDecodeError. Individual malformed coordinates become 0.0.
    """

    def __init__(
        self,
        mirror: bool = True,
        max_hands: int = 2,
        num_joints: int = NUM_JOINTS
    ):
        """
        Args:
            mirror: Swap 'Left'/'Right' handedness labels
            max_hands: Maximum number of hands decoded per frame
            num_joints: Maximum number of joints decoded per hand
        """
        self.mirror = mirror
        self.max_hands = max_hands
        self.num_joints = num_joints

    def decode(self, payload: Payload) -> DecodedFrame:
        """
        Decode one frame payload.

        Args:
            payload: JSON bytes/str or an already parsed object

        Returns:
            DecodedFrame with joint observations and handedness labels

        Raises:
            FrameDecodeError: If the payload shape is invalid
        """
        data = self._load(payload)

        if isinstance(data, list):
            data = {'landmarks': data}
        elif not isinstance(data, dict):
            raise FrameDecodeError(
                f"Frame must be an object or a list of hands, got {type(data).__name__}"
            )

        try:
            parsed = LandmarkPayload.model_validate(data)
        except ValidationError as exc:
            raise FrameDecodeError(f"Invalid frame shape: {exc.error_count()} error(s)") from exc

        hands = parsed.landmarks[:self.max_hands]
        if len(parsed.landmarks) > self.max_hands:
            logger.debug(f"Ignoring {len(parsed.landmarks) - self.max_hands} extra hand(s)")

        joints = []
        for hand_index, records in enumerate(hands):
            for joint_index, record in enumerate(records[:self.num_joints]):
                joints.append(JointObservation(
                    hand_index=hand_index,
                    joint_index=joint_index,
                    x=record.x,
                    y=record.y,
                    z=record.z
                ))

        handedness = []
        for hand_index in range(len(hands)):
            label = None
            if hand_index < len(parsed.handednesses):
                record = parsed.handednesses[hand_index]
                if record is not None:
                    label = record.display_name
            if self.mirror:
                label = mirror_handedness(label)
            handedness.append(label)

        return DecodedFrame(joints=joints, handedness=handedness, hand_count=len(hands))

    @staticmethod
    def _load(payload: Payload) -> Any:
        """Parse JSON text when the payload is not already structured."""
        if isinstance(payload, (bytes, bytearray)):
            try:
                payload = bytes(payload).decode('utf-8')
            except UnicodeDecodeError as exc:
                raise FrameDecodeError("Frame payload is not valid UTF-8") from exc

        if isinstance(payload, str):
            try:
                return json.loads(payload)
            except json.JSONDecodeError as exc:
                raise FrameDecodeError(f"Frame payload is not valid JSON: {exc.msg}") from exc
            except (ValueError, RecursionError) as exc:
                # Oversized integer literals or nesting past the parser depth
                raise FrameDecodeError(f"Frame payload cannot be parsed: {type(exc).__name__}") from exc

        return payload


_default_decoder = LandmarkFrameDecoder()


def decode_frame(payload: Payload) -> DecodedFrame:
    """Decode a payload with the default decoder settings."""
    return _default_decoder.decode(payload)
