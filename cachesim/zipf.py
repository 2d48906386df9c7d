"""Zipf-distributed random integers using rejection-inversion sampling."""

from __future__ import annotations

import math
import random


class Zipf:
    """Generates integers in ``[0, imax]`` with P(k) proportional to ``(v + k) ** -s``.

    Requires ``s > 1`` and ``v >= 1``.
    """

    def __init__(
        self, s: float, v: float, imax: int, rng: random.Random | None = None
    ) -> None:
        if s <= 1.0 or v < 1:
            raise ValueError("zipf requires s > 1 and v >= 1")
        self._rng = rng if rng is not None else random.Random()
        self._imax = float(imax)
        self._v = float(v)
        self._q = float(s)
        self._one_minus_q = 1.0 - self._q
        self._one_minus_q_inv = 1.0 / self._one_minus_q
        self._hxm = self._h(self._imax + 0.5)
        self._hx0_minus_hxm = (
            self._h(0.5) - math.exp(math.log(self._v) * -self._q) - self._hxm
        )
        self._s = 1 - self._hinv(
            self._h(1.5) - math.exp(-self._q * math.log(self._v + 1.0))
        )

    def _h(self, x: float) -> float:
        return math.exp(self._one_minus_q * math.log(self._v + x)) * self._one_minus_q_inv

    def _hinv(self, x: float) -> float:
        return math.exp(self._one_minus_q_inv * math.log(self._one_minus_q * x)) - self._v

    def uint64(self) -> int:
        """Return the next Zipf-distributed value."""
        while True:
            r = self._rng.random()
            ur = self._hxm + r * self._hx0_minus_hxm
            x = self._hinv(ur)
            k = math.floor(x + 0.5)
            if k - x <= self._s:
                break
            if ur >= self._h(k + 0.5) - math.exp(-math.log(k + self._v) * self._q):
                break
        return int(k)