from collections import namedtuple
from dataclasses import dataclass
from typing import List, Set

from pafparse.topology import JointType, LimbType

# > heatmap pixel coordinates, hashable so skeletons can test membership
Point2D = namedtuple('Point2D', ['x', 'y'])


@dataclass(frozen=True)
class JointCandidate:
    x: int  # > column
    y: int  # > row
    joint_type: JointType
    confidence: float

    @property
    def point(self) -> Point2D:
        return Point2D(self.x, self.y)


@dataclass(frozen=True)
class ScoredConnection:
    limb_type: LimbType
    score: float
    count: int  # > number of samples taken along the limb
    candidate_index1: int  # > index into the candidates of the limb's start joint
    candidate_index2: int  # > index into the candidates of the limb's end joint
    point1: Point2D
    point2: Point2D


class Skeleton:
    """Joints and connections attributed to one person. Only ever grows."""
    __slots__ = ('joints', 'connections')

    def __init__(self, connection: ScoredConnection):
        self.joints: Set[Point2D] = {connection.point1, connection.point2}
        self.connections: List[ScoredConnection] = [connection]

    def extends(self, connection: ScoredConnection) -> bool:
        # exactly one endpoint is already part of this skeleton
        return (connection.point1 in self.joints) != (connection.point2 in self.joints)

    def add(self, connection: ScoredConnection):
        self.joints.add(connection.point1)
        self.joints.add(connection.point2)
        self.connections.append(connection)

    def __len__(self):
        return len(self.joints)

    def __repr__(self):
        return 'Skeleton(joints=%d, connections=%d)' % (len(self.joints), len(self.connections))
