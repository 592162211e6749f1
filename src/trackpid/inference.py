"""
TorchScript inference engine for the PID network.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import torch

from .features.schema import FeatureSchema
from .utils.logging import get_logger


def device_from_config(device: str) -> torch.device:
    d = str(device).lower()
    if d == "auto":
        return torch.device("cuda" if torch.cuda.is_available() else "cpu")
    return torch.device(d)


class TorchScriptEngine:
    """
    Runs a serialized TorchScript module taking (dedx [B, L], variables [B, V]).

    The module is loaded on first use. When the module returns a tuple or
    list, the first element holds the class scores.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        device: str | torch.device = "auto",
        schema: Optional[FeatureSchema] = None,
    ):
        self.path = Path(path)
        self.device = device if isinstance(device, torch.device) else device_from_config(device)
        self.schema = schema
        self._module: Optional[torch.jit.ScriptModule] = None

    @property
    def module(self) -> torch.jit.ScriptModule:
        if self._module is None:
            if not self.path.is_file():
                raise FileNotFoundError(f"PID network file not found: {self.path}")
            get_logger().info(f"[trackpid] Loading PID network {self.path} on {self.device}")
            module = torch.jit.load(str(self.path), map_location=self.device)
            module.eval()
            self._module = module
        return self._module

    @torch.no_grad()
    def run(self, dedx: np.ndarray, variables: np.ndarray) -> np.ndarray:
        dedx = np.asarray(dedx, dtype=np.float32)
        variables = np.asarray(variables, dtype=np.float32)
        if self.schema is not None:
            self.schema.check_batch(dedx, variables)

        x_dedx = torch.from_numpy(dedx).to(self.device)
        x_vars = torch.from_numpy(variables).to(self.device)
        out = self.module(x_dedx, x_vars)
        if isinstance(out, (tuple, list)):
            out = out[0]

        scores = out.detach().float().cpu().numpy()
        if scores.ndim == 1:
            scores = scores.reshape(1, -1)
        if scores.shape[0] != dedx.shape[0]:
            raise ValueError(
                f"Network returned {scores.shape[0]} rows for a batch of {dedx.shape[0]}"
            )
        return scores
