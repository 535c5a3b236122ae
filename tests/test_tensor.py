import unittest

import numpy as np

from pafparse.tensor import HeatmapTensor, MalformedTensorError, clamped_index
from pafparse.topology import JointType


def numbered_output():
    return np.arange(44 * 64 * 64, dtype=np.float32).reshape(44, 64, 64)


class TestHeatmapTensor(unittest.TestCase):
    def test_accepts_3d_and_flat(self):
        output = numbered_output()
        a = HeatmapTensor(output)
        b = HeatmapTensor(output.reshape(-1))
        self.assertEqual(a.shape, (44, 64, 64))
        np.testing.assert_array_equal(a.layer(3), b.layer(3))

    def test_rejects_wrong_shape(self):
        with self.assertRaises(MalformedTensorError):
            HeatmapTensor(np.zeros((44, 32, 32), dtype=np.float32))
        with self.assertRaises(MalformedTensorError):
            HeatmapTensor(np.zeros((1, 44, 64, 64), dtype=np.float32))
        with self.assertRaises(MalformedTensorError):
            HeatmapTensor(np.zeros(44 * 64 * 64 - 1, dtype=np.float32))
        with self.assertRaises(MalformedTensorError):
            HeatmapTensor(None)

    def test_malformed_is_value_error(self):
        self.assertTrue(issubclass(MalformedTensorError, ValueError))

    def test_layer_accessors(self):
        output = numbered_output()
        tensor = HeatmapTensor(output)
        np.testing.assert_array_equal(tensor.heatmap(JointType.Neck), output[1].reshape(-1))
        np.testing.assert_array_equal(tensor.background(), output[15].reshape(-1))
        np.testing.assert_array_equal(tensor.paf(0), output[16].reshape(-1))
        np.testing.assert_array_equal(tensor.paf(27), output[43].reshape(-1))
        self.assertEqual(tensor.joint_heatmaps().shape, (15, 64 * 64))

    def test_linear_index(self):
        output = numbered_output()
        tensor = HeatmapTensor(output)
        self.assertEqual(tensor.linear_index(2, 3, 4), 2 * 4096 + 3 * 64 + 4)
        self.assertEqual(float(output.reshape(-1)[tensor.linear_index(2, 3, 4)]), float(output[2, 3, 4]))
        with self.assertRaises(AssertionError):
            tensor.linear_index(2, 64, 0)

    def test_clamped_index(self):
        self.assertEqual(clamped_index(3, 4, 64, 4096), 3 * 64 + 4)
        self.assertEqual(clamped_index(-1, 5, 64, 4096), 0)
        self.assertEqual(clamped_index(64, 10, 64, 4096), 4095)
        # > past the right edge a column wraps into the next row
        self.assertEqual(clamped_index(2, 64, 64, 4096), 3 * 64)
        np.testing.assert_array_equal(clamped_index([0, 1], [0, -1], 64, 4096), [0, 63])

    def test_background_has_no_candidates(self):
        tensor = HeatmapTensor(numbered_output())
        with self.assertRaises(ValueError):
            tensor.heatmap(JointType.Background)

    def test_read_only(self):
        tensor = HeatmapTensor(numbered_output())
        with self.assertRaises(ValueError):
            tensor.layer(0)[0] = 1.


if __name__ == '__main__':
    unittest.main()
