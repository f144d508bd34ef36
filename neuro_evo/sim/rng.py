# neuro_evo/sim/rng.py
import random
from typing import Any, Dict

import numpy as np

class RNG:
    _rng = random.Random()
    _np = np.random.default_rng()

    @classmethod
    def seed(cls, s: int):
        cls._rng.seed(s)
        cls._np = np.random.default_rng(s)

    @classmethod
    def random(cls) -> float:
        return cls._rng.random()

    @classmethod
    def uniform(cls, a: float, b: float) -> float:
        return cls._rng.uniform(a, b)

    @classmethod
    def randrange(cls, n: int) -> int:
        return cls._rng.randrange(n)

    @classmethod
    def choice(cls, seq):
        return cls._rng.choice(seq)

    @classmethod
    def shuffle(cls, seq) -> None:
        cls._rng.shuffle(seq)

    @classmethod
    def gauss(cls, mu: float, sigma: float) -> float:
        return cls._rng.gauss(mu, sigma)

    @classmethod
    def np(cls) -> np.random.Generator:
        """Vectorised draws (weight crossover / mutation)."""
        return cls._np

    # ---- plain-data state for snapshots ----
    @classmethod
    def get_state(cls) -> Dict[str, Any]:
        version, internal, gauss_next = cls._rng.getstate()
        return {
            "py": [version, list(internal), gauss_next],
            "np": cls._np.bit_generator.state,
        }

    @classmethod
    def set_state(cls, state: Dict[str, Any]) -> None:
        version, internal, gauss_next = state["py"]
        cls._rng.setstate((version, tuple(internal), gauss_next))
        gen = np.random.default_rng()
        gen.bit_generator.state = state["np"]
        cls._np = gen
