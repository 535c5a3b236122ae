"""
Multi-person skeleton assembly from MPI-15 heatmap + part affinity field (PAF) network output.
Handles joint candidate extraction, PAF limb scoring, greedy limb matching and skeleton grouping.
"""
import logging

logging_str = "[%(asctime)s: %(levelname)s: %(module)s: %(message)s]"

logger = logging.getLogger("pafparseLogger")
logger.addHandler(logging.NullHandler())

from .topology import JointType, LimbType, LIMB_TABLE, TopologyError  # noqa: E402
from .common import Point2D, JointCandidate, ScoredConnection, Skeleton  # noqa: E402
from .tensor import HeatmapTensor, MalformedTensorError  # noqa: E402
from .config import AssemblyConfig, load_config  # noqa: E402
from .parse_skeletons import (  # noqa: E402
    candidate_threshold,
    find_peaks,
    score_limb,
    find_connections,
    find_humans,
)
from .inference import InferenceUnavailable, TorchBackend  # noqa: E402
from .estimator import PoseEstimation, PoseResult, TimingRecord  # noqa: E402

__all__ = [
    'logger',
    'JointType',
    'LimbType',
    'LIMB_TABLE',
    'TopologyError',
    'Point2D',
    'JointCandidate',
    'ScoredConnection',
    'Skeleton',
    'HeatmapTensor',
    'MalformedTensorError',
    'AssemblyConfig',
    'load_config',
    'candidate_threshold',
    'find_peaks',
    'score_limb',
    'find_connections',
    'find_humans',
    'InferenceUnavailable',
    'TorchBackend',
    'PoseEstimation',
    'PoseResult',
    'TimingRecord',
]

__version__ = '1.0.0'
