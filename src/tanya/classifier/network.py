"""Small fully connected sigmoid network in numpy.

Trained with mini-batch gradient descent with momentum on a mean squared
error loss. Outputs are independent sigmoids, so the network is a
multi-label classifier: every output unit is one tag probability.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np


def sigmoid(x: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-np.clip(x, -500, 500)))


class FeedForwardNetwork:
    """Sigmoid MLP with explicit weight state.

    Args:
        layer_sizes: ``[inputs, *hidden, outputs]``
        rng: Generator used for weight initialisation
        weights: Existing weight matrices (restoring a trained model)
        biases: Existing bias vectors (restoring a trained model)
    """

    def __init__(
        self,
        layer_sizes: Sequence[int],
        rng: np.random.Generator | None = None,
        weights: Sequence[np.ndarray] | None = None,
        biases: Sequence[np.ndarray] | None = None,
    ):
        if len(layer_sizes) < 2 or any(size < 1 for size in layer_sizes):
            raise ValueError(f"Invalid layer sizes: {list(layer_sizes)}")
        self.layer_sizes = tuple(int(size) for size in layer_sizes)

        if weights is None or biases is None:
            rng = rng or np.random.default_rng()
            self.weights = [
                rng.normal(0.0, 1.0 / np.sqrt(fan_in), size=(fan_in, fan_out))
                for fan_in, fan_out in zip(self.layer_sizes, self.layer_sizes[1:])
            ]
            self.biases = [np.zeros(fan_out) for fan_out in self.layer_sizes[1:]]
        else:
            self.weights = [np.asarray(w, dtype=np.float64) for w in weights]
            self.biases = [np.asarray(b, dtype=np.float64) for b in biases]
            self._check_shapes()

        self._velocity_w = [np.zeros_like(w) for w in self.weights]
        self._velocity_b = [np.zeros_like(b) for b in self.biases]

    def _check_shapes(self) -> None:
        expected = list(zip(self.layer_sizes, self.layer_sizes[1:]))
        if len(self.weights) != len(expected) or len(self.biases) != len(expected):
            raise ValueError(
                f"Expected {len(expected)} weight layers, got {len(self.weights)} weights "
                f"and {len(self.biases)} biases"
            )
        for i, ((fan_in, fan_out), w, b) in enumerate(zip(expected, self.weights, self.biases)):
            if w.shape != (fan_in, fan_out) or b.shape != (fan_out,):
                raise ValueError(
                    f"Layer {i}: expected weights {(fan_in, fan_out)} and bias {(fan_out,)}, "
                    f"got {w.shape} and {b.shape}"
                )

    @property
    def input_size(self) -> int:
        return self.layer_sizes[0]

    @property
    def output_size(self) -> int:
        return self.layer_sizes[-1]

    def _activations(self, x: np.ndarray) -> list[np.ndarray]:
        activations = [x]
        for w, b in zip(self.weights, self.biases):
            activations.append(sigmoid(activations[-1] @ w + b))
        return activations

    def forward(self, x: np.ndarray) -> np.ndarray:
        """Output probabilities for a single vector or a batch."""
        return self._activations(np.asarray(x, dtype=np.float64))[-1]

    def train_batch(self, x: np.ndarray, y: np.ndarray, learning_rate: float, momentum: float) -> float:
        """One gradient step on a batch; returns the batch mean squared error."""
        activations = self._activations(x)
        output = activations[-1]
        error = output - y
        mse = float(np.mean(error ** 2))

        delta = error * output * (1.0 - output)
        batch = x.shape[0]
        for layer in range(len(self.weights) - 1, -1, -1):
            grad_w = activations[layer].T @ delta / batch
            grad_b = delta.mean(axis=0)
            if layer > 0:
                previous = activations[layer]
                delta = (delta @ self.weights[layer].T) * previous * (1.0 - previous)

            self._velocity_w[layer] = momentum * self._velocity_w[layer] - learning_rate * grad_w
            self._velocity_b[layer] = momentum * self._velocity_b[layer] - learning_rate * grad_b
            self.weights[layer] += self._velocity_w[layer]
            self.biases[layer] += self._velocity_b[layer]

        return mse

    def to_dict(self) -> dict[str, Any]:
        return {
            "layers": list(self.layer_sizes),
            "weights": [w.tolist() for w in self.weights],
            "biases": [b.tolist() for b in self.biases],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FeedForwardNetwork":
        return cls(
            data["layers"],
            weights=[np.array(w, dtype=np.float64) for w in data["weights"]],
            biases=[np.array(b, dtype=np.float64) for b in data["biases"]],
        )
