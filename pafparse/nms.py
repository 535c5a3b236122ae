import numpy as np


def candidate_windows(xs, ys, window=5):
    """
    Square windows around candidate pixels in (x1, y1, x2, y2) form.
    The origin is clamped at 0, the size stays `window` (no clamping at the far edge).
    """
    half = window // 2
    x1 = np.maximum(0, np.asarray(xs, dtype=np.float32) - half)
    y1 = np.maximum(0, np.asarray(ys, dtype=np.float32) - half)
    return np.stack([x1, y1, x1 + window, y1 + window], axis=1)  # > (N, 4)


def box_iou(box, boxes):
    """IoU between one (4,) box and (N, 4) boxes."""
    x1 = np.maximum(box[0], boxes[:, 0])
    y1 = np.maximum(box[1], boxes[:, 1])
    x2 = np.minimum(box[2], boxes[:, 2])
    y2 = np.minimum(box[3], boxes[:, 3])
    intersection = np.maximum(0, x2 - x1) * np.maximum(0, y2 - y1)
    area = (box[2] - box[0]) * (box[3] - box[1])
    areas = (boxes[:, 2] - boxes[:, 0]) * (boxes[:, 3] - boxes[:, 1])
    union = area + areas - intersection
    return np.where(union > 0, intersection / np.maximum(union, 1e-12), 0.)


def non_max_suppression(boxes, scores, iou_threshold=0.3):
    """
    Greedy NMS. Returns indices of kept boxes in selection order (highest score first).
    A box is dropped when its IoU with an already kept box is above `iou_threshold`.
    Equal scores keep their input order.
    """
    boxes = np.asarray(boxes, dtype=np.float32).reshape(-1, 4)
    scores = np.asarray(scores, dtype=np.float32).reshape(-1)
    if len(boxes) == 0:
        return []

    # > stable sort: ties are resolved by input (raster scan) order
    order = np.argsort(-scores, kind='stable')
    keep = []
    while order.size > 0:
        current = order[0]
        keep.append(int(current))
        remaining = order[1:]
        if remaining.size == 0:
            break
        ious = box_iou(boxes[current], boxes[remaining])
        order = remaining[ious <= iou_threshold]
    return keep
