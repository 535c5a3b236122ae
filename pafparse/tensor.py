import numpy as np

from pafparse.constants import (BACKGROUND_LAYER_INDEX, HEATMAP_HEIGHT, HEATMAP_WIDTH, LAYERS_COUNT, NUM_PAFS,
                                PAF_LAYER_START_INDEX)
from pafparse.topology import JointType


class MalformedTensorError(ValueError):
    """Network output does not match the (44, 64, 64) layout."""


def clamped_index(rows, cols, stride, size):
    """Row-major linear indices of (rows, cols) inside one flat layer, clamped into [0, size - 1]."""
    return np.clip(np.asarray(rows) * stride + np.asarray(cols), 0, size - 1)


class HeatmapTensor:
    """
    Read-only view over the network output.
    Layers [0, 15) are joint heatmaps, layer 15 is background, layers [16, 44) are PAF channels.
    Every layer is exposed as a flat row-major array of height * width values.
    """

    def __init__(self, data, layers=LAYERS_COUNT, height=HEATMAP_HEIGHT, width=HEATMAP_WIDTH):
        if data is None:
            raise MalformedTensorError('no tensor data')
        array = np.asarray(data, dtype=np.float32)
        expected = (layers, height, width)
        if array.ndim == 1:
            if array.size != layers * height * width:
                raise MalformedTensorError('flat tensor has {} values, expected {} for shape {}'.format(
                    array.size, layers * height * width, expected))
            array = array.reshape(expected)
        elif array.shape != expected:
            raise MalformedTensorError('tensor shape {} does not match {}'.format(array.shape, expected))

        self.layers = layers
        self.height = height
        self.width = width
        self.layer_stride = height * width
        # > (layers, H*W), each row is one flat layer
        self._flat = np.ascontiguousarray(array).reshape(layers, self.layer_stride)
        self._flat.setflags(write=False)

    @property
    def shape(self):
        return self.layers, self.height, self.width

    def linear_index(self, layer, row, col):
        assert 0 <= layer < self.layers, 'layer {} out of range'.format(layer)
        assert 0 <= row < self.height, 'row {} out of range'.format(row)
        assert 0 <= col < self.width, 'col {} out of range'.format(col)
        return layer * self.layer_stride + row * self.width + col

    def layer(self, layer):
        assert 0 <= layer < self.layers, 'layer {} out of range'.format(layer)
        return self._flat[layer]

    def heatmap(self, joint_type: JointType):
        if joint_type is JointType.Background:
            raise ValueError('background layer carries no joint candidates')
        return self.layer(joint_type.layer_index)

    def background(self):
        return self.layer(BACKGROUND_LAYER_INDEX)

    def joint_heatmaps(self):
        """(15, H*W) block of joint layers, background excluded."""
        return self._flat[:BACKGROUND_LAYER_INDEX]

    def paf(self, channel):
        assert 0 <= channel < NUM_PAFS, 'PAF channel {} out of range'.format(channel)
        return self.layer(PAF_LAYER_START_INDEX + channel)
