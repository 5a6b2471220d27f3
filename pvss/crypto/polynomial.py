"""Secret-sharing polynomial p(x) = c_0 + c_1 x + ... + c_{t-1} x^{t-1}.

Only the dealer ever holds the coefficients.  What gets published are the
commitments ``g^{c_j}`` and the encrypted evaluations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from pvss.crypto import bigint


@dataclass(frozen=True)
class Polynomial:
    coefficients: Tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.coefficients:
            raise ValueError("Polynomial needs at least one coefficient")
        object.__setattr__(self, "coefficients", tuple(self.coefficients))

    @classmethod
    def random(cls, degree: int, q: int) -> Polynomial:
        """Random polynomial of *degree* with coefficients uniform in ``[0, q)``."""
        if degree < 0:
            raise ValueError(f"Invalid degree: {degree}")
        return cls([bigint.random_below(q) for _ in range(degree + 1)])

    @property
    def degree(self) -> int:
        return len(self.coefficients) - 1

    def value(self, x: int, modulus: Optional[int] = None) -> int:
        """Evaluate p(x) by accumulating powers of *x*.

        With a *modulus*, every intermediate power and partial sum is
        reduced, which keeps operands bounded and yields ``p(x) mod modulus``.
        """
        result = self.coefficients[0]
        power = 1
        for c in self.coefficients[1:]:
            power = power * x
            if modulus is not None:
                power %= modulus
            result = result + c * power
            if modulus is not None:
                result %= modulus
        if modulus is not None:
            result %= modulus
        return result

    def commitments(self, g: int, q: int) -> List[int]:
        """``[g^{c_j} mod q]`` for every coefficient."""
        return [bigint.mod_exp(g, c, q) for c in self.coefficients]
