"""
Parse every saved network output in a directory and dump the skeletons as JSON.
Accepts `.npy` files holding one (44, 64, 64) tensor and `.npz` files holding one tensor per key.
"""

import argparse
import logging
import os
import time

import numpy as np
import tqdm

from pafparse import AssemblyConfig, MalformedTensorError, PoseEstimation, load_config, logger
from pafparse.utils import save_json, setup_logging

parser = argparse.ArgumentParser(description='MPI-15 skeleton assembly over a directory of tensors')
parser.add_argument('--input-dir', type=str, required=True, help='directory with .npy / .npz network outputs')
parser.add_argument('--output', type=str, default='results/skeletons.json', help='json result file')
parser.add_argument('--config', type=str, default=None, help='yaml file with an `assembly:` section')
parser.add_argument('--log-dir', type=str, default=None, help='also write logs into this directory')


class AverageMeter(object):
    """Computes and stores the average and current value"""

    def __init__(self):
        self.val = 0
        self.avg = 0
        self.sum = 0
        self.count = 0

    def update(self, val, n=1):
        self.val = val
        self.sum += val * n
        self.count += n
        self.avg = self.sum / self.count


def iter_tensors(input_dir):
    """Yield (name, tensor) for every saved output under `input_dir`, sorted by file name."""
    for file_name in sorted(os.listdir(input_dir)):
        path = os.path.join(input_dir, file_name)
        stem, ext = os.path.splitext(file_name)
        if ext == '.npy':
            yield stem, np.load(path)
        elif ext == '.npz':
            with np.load(path) as archive:
                for key in archive.files:
                    yield '%s/%s' % (stem, key), archive[key]


def append_result(name, result, all_outputs):
    one_result = result.to_dict()
    one_result['name'] = name
    one_result['num_humans'] = len(result)
    all_outputs.append(one_result)


def validation(input_dir, results_file, config):
    estimator = PoseEstimation(config)
    batch_time = AverageMeter()
    all_outputs = []
    skipped = 0

    tic = time.time()
    for name, output in tqdm.tqdm(list(iter_tensors(input_dir))):
        try:
            result = estimator.parse(output)
        except MalformedTensorError as e:
            logger.error('[SKIP] {}: {}'.format(name, e))
            skipped += 1
            continue
        batch_time.update(result.timing.total)
        append_result(name, result, all_outputs)

    save_json(results_file, all_outputs)
    toc = time.time()
    logger.info('parsed {} tensors ({} skipped), assembly time {:.5f} ({:.5f} avg)'.format(
        len(all_outputs), skipped, batch_time.sum, batch_time.avg))
    print('> json processing time is %.5f' % (toc - tic))
    return all_outputs


if __name__ == "__main__":
    args = parser.parse_args()
    setup_logging(log_dir=args.log_dir, level=logging.INFO)

    config = load_config(args.config) if args.config else AssemblyConfig()
    validation(args.input_dir, args.output, config)
