"""
Adapters around the external network. The network is a black box that turns prepared input
into a (44, 64, 64) tensor; image preprocessing and model loading stay with the caller.
"""
import numpy as np
import torch

from pafparse import logger


class InferenceUnavailable(RuntimeError):
    """The network did not produce an output tensor."""


class TorchBackend:
    """
    Runs a `torch.nn.Module` in eval mode and returns the last-stage output as numpy.

    :param model: network whose forward returns a tensor, or a list/tuple of per-stage tensors
    :param device: device to run on, defaults to the device of the model parameters (or cpu)
    """

    def __init__(self, model: torch.nn.Module, device=None):
        self.model = model
        if device is None:
            param = next(model.parameters(), None)
            device = param.device if param is not None else torch.device('cpu')
        self.device = torch.device(device)
        self.model.to(self.device)
        self.model.eval()  # set eval mode is important

    def __call__(self, inputs) -> np.ndarray:
        input_tensor = torch.as_tensor(np.asarray(inputs, dtype=np.float32))
        if input_tensor.dim() == 3:
            input_tensor = input_tensor[None, ...]  # > (C, H, W) -> (1, C, H, W)
        try:
            with torch.no_grad():
                output = self.model(input_tensor.to(self.device))
        except Exception as e:
            raise InferenceUnavailable('network forward failed: {}'.format(e)) from e

        # > stacked networks return one output per stage, the last stage is the refined one
        while isinstance(output, (list, tuple)):
            if len(output) == 0:
                raise InferenceUnavailable('network returned no stage outputs')
            output = output[-1]
        if output is None or output.numel() == 0:
            raise InferenceUnavailable('network returned an empty tensor')

        output = output.detach().float().cpu().numpy()
        if output.ndim == 4 and output.shape[0] == 1:
            output = output[0]  # > (1, 44, 64, 64) -> (44, 64, 64)
        logger.debug('network output shape %s', output.shape)
        return output


def run_backend(backend, inputs) -> np.ndarray:
    """
    Call any backend (`TorchBackend` or a plain callable `inputs -> array`).
    Raises `InferenceUnavailable` when nothing usable comes back.
    """
    if backend is None:
        raise InferenceUnavailable('no inference backend configured')
    try:
        output = backend(inputs)
    except InferenceUnavailable:
        raise
    except Exception as e:
        raise InferenceUnavailable('backend failed: {}'.format(e)) from e
    if output is None:
        raise InferenceUnavailable('backend returned no tensor')
    return output
