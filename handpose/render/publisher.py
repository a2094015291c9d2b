"""
Render Snapshot Publisher

Builds the per-frame output for a rendering consumer: 42 fixed joint
slots (21 per hand) with an enable flag, a world-space position for
enabled joints, and the owning hand's pose.

Joints that were not delivered in the latest frame are disabled and carry
no position, so a renderer never shows them as having moved.

Usage:
    from handpose.render.publisher import RenderPublisher

    publisher = RenderPublisher()
    publisher.subscribe(lambda snapshot: draw(snapshot))
    snapshot = publisher.publish(store)
"""

from typing import Callable, List, Optional, Tuple
from dataclasses import dataclass

from .world_mapper import to_world
from ..hand.joints import JOINT_LABELS, NUM_JOINTS, JointLabel
from ..hand.skeleton import HandSlot, SkeletonStore
from ..pose.poses import Pose
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)

NUM_RENDER_SLOTS = NUM_JOINTS * len(HandSlot)


@dataclass(frozen=True)
class RenderJoint:
    """Render state of one joint slot."""
    slot: HandSlot
    joint_index: int
    label: JointLabel
    enabled: bool
    position: Optional[Tuple[float, float, float]]  # world space, None when disabled
    pose: Pose


@dataclass(frozen=True)
class RenderSnapshot:
    """Immutable render output for one processed frame."""
    frame_idx: int
    joints: Tuple[RenderJoint, ...]
    poses: Tuple[Tuple[HandSlot, Pose], ...]
    chirality: Tuple[Tuple[HandSlot, str], ...]

    def for_hand(self, slot: HandSlot) -> Tuple[RenderJoint, ...]:
        """Get the 21 joint slots of one hand."""
        return tuple(j for j in self.joints if j.slot is slot)

    def enabled_joints(self) -> List[RenderJoint]:
        return [j for j in self.joints if j.enabled]

    def pose_of(self, slot: HandSlot) -> Pose:
        return dict(self.poses)[slot]


class RenderPublisher:
    """Builds RenderSnapshots and hands them to subscribers."""

    def __init__(self):
        self._subscribers: List[Callable[[RenderSnapshot], None]] = []

    def subscribe(self, callback: Callable[[RenderSnapshot], None]):
        """Register a callback invoked with every published snapshot."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[RenderSnapshot], None]):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def build(self, store: SkeletonStore, frame_idx: int = 0) -> RenderSnapshot:
        """
        Build the render snapshot for the current store state.

        Args:
            store: Skeleton store after classification
            frame_idx: Sequence number of the processed frame

        Returns:
            RenderSnapshot with 42 joint slots
        """
        joints = []
        for slot, hand in store.items():
            for index, label in enumerate(JOINT_LABELS):
                enabled = index in hand.present_this_frame
                position = None
                if enabled:
                    joint = hand.joints[index]
                    position = to_world(joint.x, joint.y, joint.z)
                joints.append(RenderJoint(
                    slot=slot,
                    joint_index=index,
                    label=label,
                    enabled=enabled,
                    position=position,
                    pose=hand.pose
                ))

        return RenderSnapshot(
            frame_idx=frame_idx,
            joints=tuple(joints),
            poses=tuple((slot, hand.pose) for slot, hand in store.items()),
            chirality=tuple((slot, hand.chirality) for slot, hand in store.items())
        )

    def publish(self, store: SkeletonStore, frame_idx: int = 0) -> RenderSnapshot:
        """Build a snapshot and deliver it to every subscriber."""
        snapshot = self.build(store, frame_idx)

        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception(f"Render subscriber failed on frame {frame_idx}")

        return snapshot
