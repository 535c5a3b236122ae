import logging
from typing import Iterable, List, Sequence

import numpy as np

from pafparse import logger
from pafparse.common import JointCandidate, Point2D, ScoredConnection, Skeleton
from pafparse.config import AssemblyConfig
from pafparse.constants import HEATMAP_WIDTH
from pafparse.nms import candidate_windows, non_max_suppression
from pafparse.tensor import HeatmapTensor, clamped_index
from pafparse.topology import KEYPOINT_TYPES, LIMB_ORDER, JointType, LimbType

DEFAULT_CONFIG = AssemblyConfig()


def candidate_threshold(tensor: HeatmapTensor, config: AssemblyConfig = DEFAULT_CONFIG) -> float:
    """
    Adaptive confidence threshold: mean of every joint heatmap (background excluded) times
    `threshold_factor`, clamped to [threshold_lower, threshold_upper].
    """
    avg = float(np.mean(tensor.joint_heatmaps(), dtype=np.float64))
    return float(np.clip(avg * config.threshold_factor, config.threshold_lower, config.threshold_upper))


def find_layer_peaks(heatmap, joint_type: JointType, threshold: float, width=HEATMAP_WIDTH,
                     config: AssemblyConfig = DEFAULT_CONFIG) -> List[JointCandidate]:
    """
    Threshold one flat heatmap layer and keep the locally strongest pixels with NMS.
    :param heatmap: flat row-major layer, length H*W
    :return: candidates in NMS selection order (strongest first), possibly empty
    """
    heatmap = np.asarray(heatmap).reshape(-1)
    peak_idx = np.flatnonzero(heatmap > threshold)  # > raster scan order
    if peak_idx.size == 0:
        return []

    xs = peak_idx % width
    ys = peak_idx // width
    confidences = heatmap[peak_idx]

    # > `boxes`: (#peaks, (x1,y1,x2,y2)), one window per pixel above threshold
    boxes = candidate_windows(xs, ys, config.nms_window)
    keep = non_max_suppression(boxes, confidences, iou_threshold=config.nms_iou_threshold)
    return [JointCandidate(int(xs[i]), int(ys[i]), joint_type, float(confidences[i])) for i in keep]


def find_peaks(tensor: HeatmapTensor, config: AssemblyConfig = DEFAULT_CONFIG, threshold=None):
    """
    Joint candidates for every joint layer.
    :return: `all_peaks` indexed by joint layer index -> (#kp, [JointCandidate, ...])
    """
    if threshold is None:
        threshold = candidate_threshold(tensor, config)

    all_peaks = []
    for joint_type in KEYPOINT_TYPES:  # > background (layer 15) is never searched
        peaks = find_layer_peaks(tensor.heatmap(joint_type), joint_type, threshold, tensor.width, config)
        all_peaks.append(peaks)
    logger.debug('threshold %.4f, peaks per joint: %s', threshold, [len(p) for p in all_peaks])
    return all_peaks


def _round_away(numerator, denominator):
    # > round(numerator / denominator) with halves away from zero, exact on integers
    magnitude = (2 * np.abs(numerator) + denominator) // (2 * denominator)
    return np.sign(numerator) * magnitude


def line_positions(x1, y1, x2, y2):
    """
    Pixel positions walked from (x1, y1) to (x2, y2).
    `count` = max(|dx|, |dy|) + 1; each axis advances (|d| + 1) / count per step towards the end point.
    :return: xs, ys as int arrays of length `count`
    """
    span_x, span_y = abs(x2 - x1) + 1, abs(y2 - y1) + 1
    count = max(span_x, span_y)
    sign_x = -1 if x2 < x1 else 1
    sign_y = -1 if y2 < y1 else 1
    steps = np.arange(count, dtype=np.int64)
    # > position = p1 + k * span / count, kept as a fraction over `count`
    xs = _round_away(x1 * count + sign_x * steps * span_x, count)
    ys = _round_away(y1 * count + sign_y * steps * span_y, count)
    return xs.astype(np.int64), ys.astype(np.int64)


def score_limb(point1, point2, paf_x, paf_y, stride=HEATMAP_WIDTH, penalty_factor=2.0):
    """
    Score how well the PAF channels support a limb between two joint pixels.

    Every sampled position sums a 3-tap cross-section (rows -1/0/+1 for mostly horizontal lines,
    columns -1/0/+1 otherwise) of each channel and scores |sum_x| + |sum_y|.
    Samples smaller than `max_sample / penalty_factor` are replaced by `-max_sample`, so a line that
    leaves the limb's own field is pushed below zero.

    :param point1: (x, y) start pixel
    :param point2: (x, y) end pixel
    :param paf_x: flat PAF x channel, length H*W
    :param paf_y: flat PAF y channel, length H*W
    :param stride: row width of the flat channels
    :return: (score, count)
    """
    x1, y1 = int(point1[0]), int(point1[1])
    x2, y2 = int(point2[0]), int(point2[1])
    paf_x = np.asarray(paf_x).reshape(-1)
    paf_y = np.asarray(paf_y).reshape(-1)

    xs, ys = line_positions(x1, y1, x2, y2)  # > (count,)
    count = len(xs)

    if abs(x2 - x1) > abs(y2 - y1):
        # > moving horizontally: collect y - 1, y, y + 1 at every x
        tap_dx, tap_dy = np.array([0, 0, 0]), np.array([-1, 0, 1])
    else:
        # > moving vertically: collect x - 1, x, x + 1 at every y
        tap_dx, tap_dy = np.array([-1, 0, 1]), np.array([0, 0, 0])

    # > `offsets`: (count, 3) linear indices, clamped into the flat channel
    offsets = clamped_index(ys[:, None] + tap_dy[None, :], xs[:, None] + tap_dx[None, :], stride, paf_x.size)

    sum_x = paf_x[offsets].astype(np.float64).sum(axis=1)  # > (count,)
    sum_y = paf_y[offsets].astype(np.float64).sum(axis=1)  # > (count,)
    local_scores = np.abs(sum_x) + np.abs(sum_y)

    local_score_max = local_scores.max()
    # > same as `max / s > factor` for s >= 0, including s == 0
    penalized = local_score_max > penalty_factor * local_scores
    filtered_scores = np.where(penalized, -local_score_max, local_scores)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug('scores: %s filtered_scores: %s', np.round(local_scores, 4).tolist(),
                     np.round(filtered_scores, 4).tolist())
    return float(filtered_scores.sum()), count


def score_candidates(limb_type: LimbType, joints_src: Sequence[JointCandidate], joints_dst: Sequence[JointCandidate],
                     paf_x, paf_y, stride=HEATMAP_WIDTH, penalty_factor=2.0) -> List[ScoredConnection]:
    """Every (src, dst) candidate pair of one limb type with a positive score, in enumeration order."""
    connection_candidates = []
    for i, joint_src in enumerate(joints_src):
        for j, joint_dst in enumerate(joints_dst):
            point1, point2 = Point2D(joint_src.x, joint_src.y), Point2D(joint_dst.x, joint_dst.y)
            score, count = score_limb(point1, point2, paf_x, paf_y, stride, penalty_factor)
            logger.debug('%s %.4f %d %s %s', limb_type.name, score, count, tuple(point1), tuple(point2))
            if score > 0:
                connection_candidates.append(ScoredConnection(limb_type, score, count, i, j, point1, point2))
    return connection_candidates


def select_connections(connection_candidates: Iterable[ScoredConnection]) -> List[ScoredConnection]:
    """
    Greedy one-to-one selection for one limb type: highest score first, a candidate index of either
    endpoint is used at most once. Equal scores keep their enumeration order.
    """
    connections = []
    used_src, used_dst = set(), set()
    # > `sorted` is stable, also with reverse=True
    for candidate in sorted(connection_candidates, key=lambda c: c.score, reverse=True):
        if candidate.candidate_index1 in used_src or candidate.candidate_index2 in used_dst:
            continue
        connections.append(candidate)
        used_src.add(candidate.candidate_index1)
        used_dst.add(candidate.candidate_index2)
    return connections


def find_connections(all_peaks, tensor: HeatmapTensor, config: AssemblyConfig = DEFAULT_CONFIG):
    """
    Score and match limbs of every limb type.
    :param all_peaks: candidates indexed by joint layer index, as returned by `find_peaks`
    :return: (connected_limbs, connection_candidates), both lists in limb table order;
             `connected_limbs[k]` are the accepted connections of limb k,
             `connection_candidates[k]` everything scored above zero for limb k
    """
    connected_limbs = []
    all_connection_candidates = []
    for limb_type in LIMB_ORDER:
        joint_src_type, joint_dst_type = limb_type.joints
        joints_src = all_peaks[joint_src_type.layer_index]
        joints_dst = all_peaks[joint_dst_type.layer_index]

        if len(joints_src) == 0 or len(joints_dst) == 0:
            connected_limbs.append([])
            all_connection_candidates.append([])
            continue

        index_x, index_y = limb_type.paf_indices
        connection_candidates = score_candidates(limb_type, joints_src, joints_dst,
                                                 tensor.paf(index_x), tensor.paf(index_y),
                                                 tensor.width, config.score_penalty_factor)
        all_connection_candidates.append(connection_candidates)
        connected_limbs.append(select_connections(connection_candidates))
    return connected_limbs, all_connection_candidates


def find_humans(connections: Iterable[ScoredConnection]) -> List[Skeleton]:
    """
    Group matched limbs into skeletons, in the order the connections are given.

    A connection joins the first skeleton (creation order) that holds exactly one of its endpoints.
    If none qualifies, including when both endpoints already sit in skeletons, it starts a new one.
    Skeletons are never merged with each other.
    """
    humans = []
    for connection in connections:
        for human in humans:
            if human.extends(connection):
                human.add(connection)
                break
        else:
            humans.append(Skeleton(connection))
    return humans
