import math

import numpy as np
import pytest

from neuro_evo.sim.brain import NeuralNetwork, weight_count_for
from neuro_evo.sim.errors import ShapeMismatch


def test_weight_count_matches_architecture():
    assert weight_count_for(12, (16, 12), 4) == 12 * 16 + 16 + 16 * 12 + 12 + 12 * 4 + 4
    nn = NeuralNetwork()
    assert nn.weight_count == 464
    assert len(nn.get_weights()) == 464


def test_set_then_get_is_lossless():
    nn = NeuralNetwork()
    w = np.arange(nn.weight_count) / 1000.0
    nn.set_weights(w)
    assert np.array_equal(nn.get_weights(), w)


def test_flat_layout_is_rows_then_biases():
    nn = NeuralNetwork(2, (), 1, randomize=False)
    nn.set_weights([1.0, 2.0, 3.0])
    assert nn.layers[0].tolist() == [[1.0, 2.0]]
    assert nn.biases[0].tolist() == [3.0]
    assert nn.forward([1.0, 1.0]) == pytest.approx([math.tanh(6.0)])


def test_hidden_layers_use_relu():
    nn = NeuralNetwork(1, (1,), 1, randomize=False)
    # hidden: w=-1, b=0 ; output: w=1, b=0.5
    nn.set_weights([-1.0, 0.0, 1.0, 0.5])
    assert nn.forward([2.0]) == pytest.approx([math.tanh(0.5)])


def test_forward_is_deterministic_and_bounded():
    nn = NeuralNetwork()
    x = [0.3] * 12
    out1 = nn.forward(x)
    out2 = nn.forward(x)
    assert out1 == out2
    assert len(out1) == 4
    assert all(-1.0 <= v <= 1.0 for v in out1)


def test_zero_network_outputs_zero():
    nn = NeuralNetwork(randomize=False)
    assert nn.forward([1.0] * 12) == [0.0, 0.0, 0.0, 0.0]


def test_wrong_input_length_raises():
    nn = NeuralNetwork()
    with pytest.raises(ShapeMismatch):
        nn.forward([0.0] * 11)


def test_wrong_weight_length_raises():
    nn = NeuralNetwork()
    before = nn.get_weights()
    with pytest.raises(ShapeMismatch) as exc:
        nn.set_weights(np.zeros(10))
    assert exc.value.expected == 464
    assert exc.value.got == 10
    assert isinstance(exc.value, ValueError)
    assert np.array_equal(nn.get_weights(), before)


def test_two_dimensional_weights_are_not_reshaped():
    nn = NeuralNetwork()
    before = nn.get_weights()
    with pytest.raises(ShapeMismatch):
        nn.set_weights(np.zeros((2, nn.weight_count // 2)))
    assert np.array_equal(nn.get_weights(), before)


def test_clone_is_independent():
    nn = NeuralNetwork()
    copy = nn.clone()
    assert np.array_equal(copy.get_weights(), nn.get_weights())
    copy.set_weights(np.zeros(copy.weight_count))
    assert not np.array_equal(copy.get_weights(), nn.get_weights())


def test_dict_round_trip():
    nn = NeuralNetwork(3, (5,), 2)
    back = NeuralNetwork.from_dict(nn.to_dict())
    assert back.hidden_layers == (5,)
    assert np.array_equal(back.get_weights(), nn.get_weights())
    assert back.forward([0.1, 0.2, 0.3]) == nn.forward([0.1, 0.2, 0.3])
