# neuro_evo/sim/brain.py
from __future__ import annotations
from typing import Any, Dict, List, Sequence
import math

import numpy as np

from .config import BRAIN
from .errors import ShapeMismatch
from .rng import RNG


def weight_count_for(input_size: int, hidden_layers: Sequence[int], output_size: int) -> int:
    """Length of the flattened weight vector for an architecture."""
    total = 0
    prev = input_size
    for size in [*hidden_layers, output_size]:
        total += prev * size + size
        prev = size
    return total


class NeuralNetwork:
    """
    Small feedforward net: ReLU hidden layers, tanh output layer.

    Flattened weight layout (used by the GA and by snapshots), layer by layer:
      W_l rows (one row per neuron, `in` values each), then b_l (`out` values)
    so len(get_weights()) == sum(in*out + out) over layers.
    """
    def __init__(self, input_size: int = BRAIN.input_size,
                 hidden_layers: Sequence[int] = BRAIN.hidden_layers,
                 output_size: int = BRAIN.output_size,
                 randomize: bool = True):
        self.input_size = int(input_size)
        self.hidden_layers = tuple(int(h) for h in hidden_layers)
        self.output_size = int(output_size)
        self.layers: List[np.ndarray] = []
        self.biases: List[np.ndarray] = []

        prev = self.input_size
        for size in [*self.hidden_layers, self.output_size]:
            if randomize:
                # Xavier-style init
                scale = math.sqrt(2.0 / prev)
                w = (RNG.np().random((size, prev)) - 0.5) * scale
                b = (RNG.np().random(size) - 0.5) * BRAIN.bias_init_scale
            else:
                w = np.zeros((size, prev))
                b = np.zeros(size)
            self.layers.append(w)
            self.biases.append(b)
            prev = size

    @property
    def weight_count(self) -> int:
        return weight_count_for(self.input_size, self.hidden_layers, self.output_size)

    def forward(self, inputs: Sequence[float]) -> List[float]:
        x = np.asarray(inputs, dtype=np.float64)
        if x.shape != (self.input_size,):
            raise ShapeMismatch(self.input_size, int(x.size), what="inputs")
        last = len(self.layers) - 1
        for l, (w, b) in enumerate(zip(self.layers, self.biases)):
            x = w @ x + b
            x = np.maximum(x, 0.0) if l < last else np.tanh(x)
        return x.tolist()

    def get_weights(self) -> np.ndarray:
        parts = []
        for w, b in zip(self.layers, self.biases):
            parts.append(w.ravel())
            parts.append(b)
        return np.concatenate(parts)

    def set_weights(self, weights: Sequence[float]) -> None:
        flat = np.asarray(weights, dtype=np.float64)
        expected = self.weight_count
        if flat.ndim != 1 or flat.size != expected:
            raise ShapeMismatch(expected, int(flat.size), what=f"weights of shape {flat.shape}")
        idx = 0
        for l, w in enumerate(self.layers):
            n = w.size
            self.layers[l] = flat[idx:idx + n].reshape(w.shape).copy()
            idx += n
            m = self.biases[l].size
            self.biases[l] = flat[idx:idx + m].copy()
            idx += m

    def clone(self) -> NeuralNetwork:
        copy = NeuralNetwork(self.input_size, self.hidden_layers, self.output_size, randomize=False)
        copy.set_weights(self.get_weights())
        return copy

    # ---- plain data ----
    def to_dict(self) -> Dict[str, Any]:
        return {
            "input_size": self.input_size,
            "hidden_layers": list(self.hidden_layers),
            "output_size": self.output_size,
            "weights": self.get_weights().tolist(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> NeuralNetwork:
        nn = cls(data["input_size"], data["hidden_layers"], data["output_size"], randomize=False)
        nn.set_weights(data["weights"])
        return nn
