"""
Static MPI-15 topology: joint types, limb types and the PAF channels that encode each limb.

The joint ordinal is the heatmap layer index and the limb table is written out by hand,
so nothing here depends on declaration order.
"""
from collections import namedtuple
from enum import Enum

from pafparse.constants import (BACKGROUND_LAYER_INDEX, LAYERS_COUNT, NUM_HEATMAPS, NUM_LIMBS, NUM_PAFS,
                                PAF_LAYER_START_INDEX)


class TopologyError(ValueError):
    """The static topology table disagrees with the tensor layout constants."""


class JointType(Enum):
    Head = 0
    Neck = 1
    RShoulder = 2
    RElbow = 3
    RWrist = 4
    LShoulder = 5
    LElbow = 6
    LWrist = 7
    RHip = 8
    RKnee = 9
    RAnkle = 10
    LHip = 11
    LKnee = 12
    LAnkle = 13
    Chest = 14
    Background = 15

    @property
    def layer_index(self):
        return self.value


class LimbType(Enum):
    HeadNeck = 0
    NeckRShoulder = 1
    RShoulderRElbow = 2
    RElbowRWrist = 3
    NeckLShoulder = 4
    LShoulderLElbow = 5
    LElbowLWrist = 6
    NeckChest = 7
    ChestRHip = 8
    RHipRKnee = 9
    RKneeRAnkle = 10
    ChestLHip = 11
    LHipLKnee = 12
    LKneeLAnkle = 13

    @property
    def joints(self):
        entry = LIMB_TABLE[self]
        return entry.joint_src, entry.joint_dst

    @property
    def paf_indices(self):
        """(x-channel, y-channel) offsets from the first PAF layer."""
        entry = LIMB_TABLE[self]
        return entry.paf_x, entry.paf_y


LimbSpec = namedtuple('LimbSpec', ['joint_src', 'joint_dst', 'paf_x', 'paf_y'])

LIMB_TABLE = {
    LimbType.HeadNeck: LimbSpec(JointType.Head, JointType.Neck, 0, 1),
    LimbType.NeckRShoulder: LimbSpec(JointType.Neck, JointType.RShoulder, 2, 3),
    LimbType.RShoulderRElbow: LimbSpec(JointType.RShoulder, JointType.RElbow, 4, 5),
    LimbType.RElbowRWrist: LimbSpec(JointType.RElbow, JointType.RWrist, 6, 7),
    LimbType.NeckLShoulder: LimbSpec(JointType.Neck, JointType.LShoulder, 8, 9),
    LimbType.LShoulderLElbow: LimbSpec(JointType.LShoulder, JointType.LElbow, 10, 11),
    LimbType.LElbowLWrist: LimbSpec(JointType.LElbow, JointType.LWrist, 12, 13),
    LimbType.NeckChest: LimbSpec(JointType.Neck, JointType.Chest, 14, 15),
    LimbType.ChestRHip: LimbSpec(JointType.Chest, JointType.RHip, 16, 17),
    LimbType.RHipRKnee: LimbSpec(JointType.RHip, JointType.RKnee, 18, 19),
    LimbType.RKneeRAnkle: LimbSpec(JointType.RKnee, JointType.RAnkle, 20, 21),
    LimbType.ChestLHip: LimbSpec(JointType.Chest, JointType.LHip, 22, 23),
    LimbType.LHipLKnee: LimbSpec(JointType.LHip, JointType.LKnee, 24, 25),
    LimbType.LKneeLAnkle: LimbSpec(JointType.LKnee, JointType.LAnkle, 26, 27),
}

# > joints that own a heatmap layer, in layer order
KEYPOINT_TYPES = tuple(j for j in JointType if j is not JointType.Background)
# > limb processing order used by the matcher and the assembler
LIMB_ORDER = tuple(sorted(LimbType, key=lambda limb: limb.value))


def validate_topology():
    """Check the static tables against the tensor constants. Raises `TopologyError`."""
    if sorted(j.value for j in JointType) != list(range(NUM_HEATMAPS)):
        raise TopologyError('joint ordinals must cover [0, {}) without gaps'.format(NUM_HEATMAPS))
    if JointType.Background.value != BACKGROUND_LAYER_INDEX:
        raise TopologyError('background joint must sit on layer {}, got {}'.format(
            BACKGROUND_LAYER_INDEX, JointType.Background.value))
    if PAF_LAYER_START_INDEX + NUM_PAFS != LAYERS_COUNT:
        raise TopologyError('PAF block does not end at the last layer')
    if set(LIMB_TABLE) != set(LimbType) or len(LIMB_TABLE) != NUM_LIMBS:
        raise TopologyError('limb table must describe exactly {} limbs'.format(NUM_LIMBS))

    channels = []
    for limb, entry in LIMB_TABLE.items():
        if JointType.Background in (entry.joint_src, entry.joint_dst):
            raise TopologyError('{} is attached to the background layer'.format(limb.name))
        if entry.joint_src is entry.joint_dst:
            raise TopologyError('{} connects a joint to itself'.format(limb.name))
        channels.extend((entry.paf_x, entry.paf_y))
    if sorted(channels) != list(range(NUM_PAFS)):
        raise TopologyError('PAF channels must be unique and cover [0, {})'.format(NUM_PAFS))


validate_topology()
