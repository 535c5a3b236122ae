# > Fixed layout of the MPI-15 network output: (44, 64, 64)
LAYERS_COUNT = 44
BACKGROUND_LAYER_INDEX = 15  # > joint heatmaps occupy [0, 15)
PAF_LAYER_START_INDEX = 16  # > PAF channels occupy [16, 44)
HEATMAP_WIDTH = 64
HEATMAP_HEIGHT = 64

NUM_KEYPOINTS = BACKGROUND_LAYER_INDEX  # > 15 joints, background excluded
NUM_HEATMAPS = NUM_KEYPOINTS + 1  # > joints + background
NUM_PAFS = LAYERS_COUNT - PAF_LAYER_START_INDEX  # > 28 = 14 limbs * (x, y)
NUM_LIMBS = NUM_PAFS // 2
