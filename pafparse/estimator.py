import itertools
import time
from dataclasses import dataclass, field
from typing import Dict, List

from pafparse import logger
from pafparse.common import JointCandidate, ScoredConnection, Skeleton
from pafparse.config import AssemblyConfig
from pafparse.inference import InferenceUnavailable, run_backend
from pafparse.parse_skeletons import candidate_threshold, find_connections, find_humans, find_peaks
from pafparse.tensor import HeatmapTensor


@dataclass(frozen=True)
class TimingRecord:
    """Wall-clock seconds spent in each stage of one frame."""
    inference: float = 0.
    extraction: float = 0.
    matching: float = 0.
    assembly: float = 0.

    @property
    def total(self):
        return self.inference + self.extraction + self.matching + self.assembly

    @property
    def total_string(self):
        """All four stages, formatted '%.2f'. Inference alone is `inference`."""
        return '%.2f' % self.total


@dataclass
class PoseResult:
    # > skeleton index (creation order) -> connections that built it
    skeletons: Dict[int, List[ScoredConnection]] = field(default_factory=dict)
    success: bool = True
    timing: TimingRecord = field(default_factory=TimingRecord)
    threshold: float = 0.
    # > diagnostics
    candidates: List[List[JointCandidate]] = field(default_factory=list)
    connection_candidates: List[ScoredConnection] = field(default_factory=list)
    connections: List[ScoredConnection] = field(default_factory=list)
    humans: List[Skeleton] = field(default_factory=list)

    def __len__(self):
        return len(self.skeletons)

    def to_dict(self):
        """JSON friendly view: skeleton index -> [{limb, score, count, point1, point2}, ...]."""
        return {
            'success': self.success,
            'elapsed': self.timing.total,
            'skeletons': {
                str(human_id): [{
                    'limb': c.limb_type.name,
                    'score': c.score,
                    'count': c.count,
                    'point1': [c.point1.x, c.point1.y],
                    'point2': [c.point2.x, c.point2.y],
                } for c in connections]
                for human_id, connections in self.skeletons.items()
            },
        }


class PoseEstimation:
    """
    Runs candidate extraction, limb scoring/matching and skeleton grouping on one network output.
    All per-frame state lives in the returned `PoseResult`; one instance can serve many frames.
    """

    def __init__(self, config: AssemblyConfig = None, backend=None):
        self.config = config or AssemblyConfig()
        self.backend = backend

    def estimate(self, inputs, backend=None) -> PoseResult:
        """Run inference on prepared `inputs`, then `parse` its output. Inference failure gives an empty result."""
        backend = backend or self.backend
        tic = time.time()
        try:
            output = run_backend(backend, inputs)
        except InferenceUnavailable as e:
            logger.warning('inference unavailable: {}'.format(e))
            return PoseResult(success=False, timing=TimingRecord(inference=time.time() - tic))
        inference_time = time.time() - tic
        return self.parse(output, inference_time=inference_time)

    def parse(self, output, inference_time=0.) -> PoseResult:
        """
        Assemble skeletons from a (44, 64, 64) tensor (or its flat form).
        Raises `MalformedTensorError` if the layout does not match.
        """
        tensor = output if isinstance(output, HeatmapTensor) else HeatmapTensor(output)

        # > [1] joint candidates per joint type
        tic = time.time()
        threshold = candidate_threshold(tensor, self.config)
        all_peaks = find_peaks(tensor, self.config, threshold=threshold)
        extraction_time = time.time() - tic

        # > [2] limb scores + greedy matching per limb type
        tic = time.time()
        connected_limbs, connection_candidates = find_connections(all_peaks, tensor, self.config)
        matching_time = time.time() - tic

        # > [3] group connections by human, limb table order
        tic = time.time()
        connections = list(itertools.chain.from_iterable(connected_limbs))
        humans = find_humans(connections)
        assembly_time = time.time() - tic

        timing = TimingRecord(inference=inference_time, extraction=extraction_time,
                              matching=matching_time, assembly=assembly_time)
        logger.info('{} candidates, {} connections, {} humans in {}s'.format(
            sum(len(p) for p in all_peaks), len(connections), len(humans), timing.total_string))

        return PoseResult(
            skeletons={human_id: list(human.connections) for human_id, human in enumerate(humans)},
            success=True,
            timing=timing,
            threshold=threshold,
            candidates=all_peaks,
            connection_candidates=list(itertools.chain.from_iterable(connection_candidates)),
            connections=connections,
            humans=humans,
        )
