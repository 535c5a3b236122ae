"""
Synthetic network outputs: a Gaussian peak per joint and unit PAF vectors painted along every limb.
Used by the tests and by `demo_tensor.py --synthetic`.
"""
import numpy as np

from pafparse.constants import (BACKGROUND_LAYER_INDEX, HEATMAP_HEIGHT, HEATMAP_WIDTH, LAYERS_COUNT,
                                PAF_LAYER_START_INDEX)
from pafparse.topology import KEYPOINT_TYPES, LIMB_ORDER, JointType

# > (dx, dy) offsets of every joint from the person's center, heatmap pixels
STANDING_POSE = {
    JointType.Head: (0, -14),
    JointType.Neck: (0, -9),
    JointType.RShoulder: (-4, -8),
    JointType.RElbow: (-6, -3),
    JointType.RWrist: (-7, 2),
    JointType.LShoulder: (4, -8),
    JointType.LElbow: (6, -3),
    JointType.LWrist: (7, 2),
    JointType.Chest: (0, -3),
    JointType.RHip: (-3, 3),
    JointType.RKnee: (-3, 9),
    JointType.RAnkle: (-3, 15),
    JointType.LHip: (3, 3),
    JointType.LKnee: (3, 9),
    JointType.LAnkle: (3, 15),
}


def center_label_heatmap(width, height, c_x, c_y, sigma):
    X1 = np.arange(width, dtype=np.float32)
    Y1 = np.arange(height, dtype=np.float32)
    [X, Y] = np.meshgrid(X1, Y1)
    X = X - c_x
    Y = Y - c_y
    D2 = X * X + Y * Y
    E2 = 2.0 * sigma * sigma
    return np.exp(-D2 / E2)


def limb_mask(width, height, p1, p2, limb_width):
    """Pixels whose distance to the segment p1-p2 is at most `limb_width`."""
    (x1, y1), (x2, y2) = p1, p2
    dx, dy = float(x2 - x1), float(y2 - y1)
    len_sq = dx * dx + dy * dy
    Y, X = np.mgrid[0:height, 0:width].astype(np.float32)
    if len_sq == 0:
        return np.hypot(X - x1, Y - y1) <= limb_width
    t = np.clip(((X - x1) * dx + (Y - y1) * dy) / len_sq, 0., 1.)
    return np.hypot(X - (x1 + t * dx), Y - (y1 + t * dy)) <= limb_width


def person_joints(center, pose=None):
    """Absolute joint pixels of one person centered at (cx, cy)."""
    pose = pose or STANDING_POSE
    cx, cy = center
    return {joint: (cx + dx, cy + dy) for joint, (dx, dy) in pose.items()}


def make_tensor(people, sigma=1.0, limb_width=2.0, width=HEATMAP_WIDTH, height=HEATMAP_HEIGHT):
    """
    :param people: list of joint dicts (`JointType -> (x, y)`), e.g. from `person_joints`;
                   missing joints are simply not drawn
    :return: float32 array (44, height, width)
    """
    output = np.zeros((LAYERS_COUNT, height, width), dtype=np.float32)
    for joints in people:
        for joint_type in KEYPOINT_TYPES:
            if joint_type not in joints:
                continue
            c_x, c_y = joints[joint_type]
            heatmap = center_label_heatmap(width, height, c_x, c_y, sigma)
            layer = output[joint_type.layer_index]
            np.maximum(layer, heatmap, out=layer)

        for limb_type in LIMB_ORDER:
            joint_src, joint_dst = limb_type.joints
            if joint_src not in joints or joint_dst not in joints:
                continue
            p1, p2 = np.array(joints[joint_src], dtype=np.float32), np.array(joints[joint_dst], dtype=np.float32)
            norm = np.linalg.norm(p2 - p1)
            if norm == 0:
                continue
            vx, vy = (p2 - p1) / norm
            mask = limb_mask(width, height, p1, p2, limb_width)
            index_x, index_y = limb_type.paf_indices
            output[PAF_LAYER_START_INDEX + index_x][mask] = vx
            output[PAF_LAYER_START_INDEX + index_y][mask] = vy

    output[BACKGROUND_LAYER_INDEX] = 1. - output[:BACKGROUND_LAYER_INDEX].max(axis=0)
    return output
