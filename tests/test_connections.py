import unittest

import numpy as np

from pafparse.common import JointCandidate, Point2D, ScoredConnection
from pafparse.parse_skeletons import find_connections, find_peaks, select_connections
from pafparse.synthetic import make_tensor, person_joints
from pafparse.tensor import HeatmapTensor
from pafparse.topology import LIMB_ORDER, JointType, LimbType


def connection(score, i, j, limb_type=LimbType.HeadNeck):
    return ScoredConnection(limb_type, score, 10, i, j, Point2D(i, 0), Point2D(j, 10))


class TestSelectConnections(unittest.TestCase):
    def test_empty(self):
        self.assertEqual(select_connections([]), [])

    def test_descending_scores(self):
        candidates = [connection(1., 0, 0), connection(5., 1, 1), connection(3., 2, 2)]
        selected = select_connections(candidates)
        self.assertEqual([c.score for c in selected], [5., 3., 1.])

    def test_conflicts_resolved_by_score(self):
        candidates = [connection(4., 0, 0), connection(9., 0, 1), connection(2., 1, 1), connection(1., 1, 0)]
        selected = select_connections(candidates)
        self.assertEqual([(c.candidate_index1, c.candidate_index2) for c in selected], [(0, 1), (1, 0)])

    def test_ties_keep_enumeration_order(self):
        candidates = [connection(2., 0, 0), connection(2., 0, 1), connection(2., 1, 0)]
        selected = select_connections(candidates)
        self.assertEqual([(c.candidate_index1, c.candidate_index2) for c in selected], [(0, 0)])

        candidates = [connection(2., 0, 1), connection(2., 0, 0)]
        selected = select_connections(candidates)
        self.assertEqual([(c.candidate_index1, c.candidate_index2) for c in selected], [(0, 1)])

    def test_random_candidates(self):
        rng = np.random.RandomState(7)
        for _ in range(20):
            candidates = [connection(float(rng.randint(1, 6)), i, j)
                          for i in range(rng.randint(1, 6)) for j in range(rng.randint(1, 6))
                          if rng.rand() < 0.7]
            selected = select_connections(candidates)

            used_src = [c.candidate_index1 for c in selected]
            used_dst = [c.candidate_index2 for c in selected]
            self.assertEqual(len(used_src), len(set(used_src)))
            self.assertEqual(len(used_dst), len(set(used_dst)))

            # > every rejected candidate lost to an accepted one with at least its score
            for candidate in candidates:
                if candidate in selected:
                    continue
                blockers = [c for c in selected
                            if c.candidate_index1 == candidate.candidate_index1
                            or c.candidate_index2 == candidate.candidate_index2]
                self.assertTrue(blockers)
                self.assertTrue(any(c.score >= candidate.score for c in blockers))


class TestFindConnections(unittest.TestCase):
    def test_missing_endpoint_gives_empty_lists(self):
        tensor = HeatmapTensor(np.zeros((44, 64, 64), dtype=np.float32))
        all_peaks = [[] for _ in range(15)]
        all_peaks[JointType.Neck.layer_index] = [JointCandidate(10, 10, JointType.Neck, 0.9)]
        connected_limbs, candidates = find_connections(all_peaks, tensor)
        self.assertEqual(len(connected_limbs), 14)
        self.assertEqual(len(candidates), 14)
        self.assertTrue(all(len(limbs) == 0 for limbs in connected_limbs))

    def test_synthetic_person(self):
        tensor = HeatmapTensor(make_tensor([person_joints((32, 32))]))
        connected_limbs, candidates = find_connections(find_peaks(tensor), tensor)
        for limb_type, limbs in zip(LIMB_ORDER, connected_limbs):
            self.assertEqual(len(limbs), 1, limb_type.name)
            self.assertIs(limbs[0].limb_type, limb_type)
            self.assertGreater(limbs[0].score, 0)

    def test_synthetic_people_are_not_crossed(self):
        people = [person_joints((16, 32)), person_joints((46, 32))]
        tensor = HeatmapTensor(make_tensor(people))
        connected_limbs, _ = find_connections(find_peaks(tensor), tensor)
        for limb_type, limbs in zip(LIMB_ORDER, connected_limbs):
            self.assertEqual(len(limbs), 2, limb_type.name)
            joint_src, joint_dst = limb_type.joints
            pairs = {(tuple(c.point1), tuple(c.point2)) for c in limbs}
            expected = {(joints[joint_src], joints[joint_dst]) for joints in people}
            self.assertEqual(pairs, expected)


if __name__ == '__main__':
    unittest.main()
