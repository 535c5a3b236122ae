from dataclasses import dataclass, fields, replace
from pathlib import Path

from pafparse import logger
from pafparse.utils import read_yaml


@dataclass(frozen=True)
class AssemblyConfig:
    # > candidate threshold = clamp(mean(joint heatmaps) * factor, lower, upper)
    threshold_factor: float = 4.0
    threshold_lower: float = 0.1
    threshold_upper: float = 0.3
    # > NMS window side (pixels) and IoU cutoff
    nms_window: int = 5
    nms_iou_threshold: float = 0.3
    # > a PAF sample is penalized when max_sample / sample > factor
    score_penalty_factor: float = 2.0

    def __post_init__(self):
        if self.threshold_lower > self.threshold_upper:
            raise ValueError('threshold_lower ({}) must not exceed threshold_upper ({})'.format(
                self.threshold_lower, self.threshold_upper))
        if self.nms_window < 1:
            raise ValueError('nms_window must be positive, got {}'.format(self.nms_window))
        if not 0 <= self.nms_iou_threshold <= 1:
            raise ValueError('nms_iou_threshold must be in [0, 1], got {}'.format(self.nms_iou_threshold))
        if self.score_penalty_factor <= 0:
            raise ValueError('score_penalty_factor must be positive, got {}'.format(self.score_penalty_factor))


def load_config(path_to_yaml: Path, base: AssemblyConfig = None) -> AssemblyConfig:
    """Override `base` (defaults if None) with the `assembly:` section of a yaml file."""
    base = base or AssemblyConfig()
    content = read_yaml(path_to_yaml)
    section = content.get('assembly') or {}

    known = {f.name: f.type for f in fields(AssemblyConfig)}
    unknown = sorted(set(section) - set(known))
    if unknown:
        raise ValueError('unknown assembly parameters in {}: {}'.format(path_to_yaml, ', '.join(unknown)))

    overrides = {}
    for name, value in section.items():
        overrides[name] = int(value) if known[name] in (int, 'int') else float(value)
    config = replace(base, **overrides)
    logger.info('assembly config: {}'.format(config))
    return config
