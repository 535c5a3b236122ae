import unittest

from pafparse.common import Point2D, ScoredConnection, Skeleton
from pafparse.parse_skeletons import find_humans
from pafparse.topology import LimbType

A, B, C, D, E, F = (Point2D(i * 5, 10) for i in range(6))


def link(p1, p2, score=1.):
    return ScoredConnection(LimbType.HeadNeck, score, 5, 0, 0, p1, p2)


class TestFindHumans(unittest.TestCase):
    def test_empty(self):
        self.assertEqual(find_humans([]), [])

    def test_chain(self):
        humans = find_humans([link(A, B), link(B, C), link(C, D)])
        self.assertEqual(len(humans), 1)
        self.assertEqual(humans[0].joints, {A, B, C, D})
        self.assertEqual(len(humans[0].connections), 3)
        self.assertEqual(len(humans[0]), 4)

    def test_disjoint(self):
        humans = find_humans([link(A, B), link(C, D)])
        self.assertEqual([h.joints for h in humans], [{A, B}, {C, D}])

    def test_bridge_does_not_merge(self):
        # > B-C touches both skeletons; it goes to the first one and the second stays apart
        bridge = link(B, C)
        humans = find_humans([link(A, B), link(C, D), bridge])
        self.assertEqual(len(humans), 2)
        self.assertEqual(humans[0].joints, {A, B, C})
        self.assertIn(bridge, humans[0].connections)
        self.assertEqual(humans[1].joints, {C, D})

    def test_first_matching_skeleton_wins(self):
        humans = find_humans([link(A, B), link(C, D), link(E, C), link(E, F)])
        self.assertEqual(len(humans), 2)
        self.assertEqual(humans[1].joints, {C, D, E, F})

    def test_both_endpoints_known_starts_new_skeleton(self):
        humans = find_humans([link(A, B), link(A, B)])
        self.assertEqual(len(humans), 2)
        self.assertEqual(humans[1].joints, {A, B})

    def test_skeleton_extends(self):
        human = Skeleton(link(A, B))
        self.assertTrue(human.extends(link(B, C)))
        self.assertTrue(human.extends(link(C, A)))
        self.assertFalse(human.extends(link(C, D)))
        self.assertFalse(human.extends(link(B, A)))


if __name__ == '__main__':
    unittest.main()
