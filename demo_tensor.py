"""
Parse one saved network output (44, 64, 64) into skeletons and print them.
"""

import argparse
import logging
import time

import numpy as np

from pafparse import PoseEstimation, AssemblyConfig, load_config, logger
from pafparse.synthetic import make_tensor, person_joints
from pafparse.utils import setup_logging

parser = argparse.ArgumentParser(description='MPI-15 skeleton assembly demo')
parser.add_argument('--tensor', type=str, default=None, help='network output saved with np.save (.npy)')
parser.add_argument('--synthetic', type=int, default=0, help='use a synthetic tensor with this many people')
parser.add_argument('--config', type=str, default=None, help='yaml file with an `assembly:` section')
parser.add_argument('--debug', action='store_true', help='log per-limb scores')


def load_tensor(args):
    if args.tensor is not None:
        return np.load(args.tensor)
    # > people side by side, 30 px apart
    people = [person_joints((16 + 30 * i, 32)) for i in range(max(1, args.synthetic))]
    return make_tensor(people)


def process(output, config):
    estimator = PoseEstimation(config)
    result = estimator.parse(output)

    for human_id, connections in result.skeletons.items():
        print('> human [%d]: %d connections' % (human_id, len(connections)))
        for c in connections:
            print('    %-16s (%2d,%2d) -> (%2d,%2d)  score=%.3f count=%d' % (
                c.limb_type.name, c.point1.x, c.point1.y, c.point2.x, c.point2.y, c.score, c.count))
    if not result.skeletons:
        print('> no people detected')
    return result


if __name__ == '__main__':
    args = parser.parse_args()
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO)

    config = load_config(args.config) if args.config else AssemblyConfig()
    output = load_tensor(args)
    logger.info('tensor shape: {}'.format(output.shape))

    tic = time.time()
    result = process(output, config)
    toc = time.time()
    print('> threshold = %.3f, candidates = %d' % (result.threshold, sum(len(p) for p in result.candidates)))
    print('> stage timing: extraction %.5f, matching %.5f, assembly %.5f' % (
        result.timing.extraction, result.timing.matching, result.timing.assembly))
    print('processing time is %.5f' % (toc - tic))
