# neuro_evo/sim/errors.py


class EvolutionError(Exception):
    """Base class for errors raised by the simulation core."""


class ShapeMismatch(EvolutionError, ValueError):
    """A weight or input vector does not fit the network architecture."""

    def __init__(self, expected: int, got: int, what: str = "weights"):
        super().__init__(f"{what}: expected {expected} values, got {got}")
        self.expected = expected
        self.got = got


class ConfigurationError(EvolutionError, ValueError):
    """Settings rejected before any tick runs."""
