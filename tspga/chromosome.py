"""
Plik: tspga/chromosome.py

Cel i rola w projekcie
----------------------
Reprezentacja osobnika (chromosomu):
- `route` - permutacja indeksów miast 0..N-1 (kolejność odwiedzin, cykl zamyka się
  powrotem do pierwszego miasta), przechowywana jako `np.ndarray` int64,
- zapamiętany (cache) koszt trasy = fitness.

Kontrakt „dirty”:
- operator, który zmienia `route` w miejscu, wywołuje `invalidate()`,
- tylko silnik (`engine.py`) przelicza fitness przez `evaluate(cost_model)`,
  dokładnie raz na tick, tuż przed decyzją o zastąpieniu,
- odczyt `fitness()` z nieaktualnym cache to błąd programisty
  (`FitnessNotEvaluatedError`), a nie ciche przeliczenie.
"""
from __future__ import annotations

from typing import Optional, Sequence, Union

import numpy as np

from .errors import FitnessNotEvaluatedError
from .fitness import CostModel, check_permutation


class Chromosome:
    """Trasa (permutacja miast) z zapamiętanym kosztem."""

    __slots__ = ("route", "_cost")

    def __init__(self, route: Union[np.ndarray, Sequence[int]], cost: Optional[float] = None):
        r = np.asarray(route)
        check_permutation(r, r.shape[0] if r.ndim == 1 else -1)
        self.route = np.array(r, dtype=np.int64)
        self._cost = None if cost is None else float(cost)

    def __len__(self) -> int:
        return int(self.route.shape[0])

    def __repr__(self) -> str:
        cost = "dirty" if self._cost is None else f"{self._cost:.3f}"
        return f"Chromosome(route={self.route.tolist()}, cost={cost})"

    @property
    def is_evaluated(self) -> bool:
        return self._cost is not None

    def fitness(self) -> float:
        """Zwróć zapamiętany koszt trasy (mniej = lepiej)."""
        if self._cost is None:
            raise FitnessNotEvaluatedError("Fitness chromosomu nie został policzony po ostatniej zmianie trasy")
        return self._cost

    def invalidate(self) -> None:
        """Oznacz cache jako nieaktualny (po zmianie `route`)."""
        self._cost = None

    def evaluate(self, cost_model: CostModel) -> float:
        """Przelicz koszt przez CostModel (sprawdza też poprawność permutacji)."""
        self._cost = cost_model.tour_cost(self.route)
        return self._cost

    def copy(self) -> "Chromosome":
        return Chromosome(self.route.copy(), self._cost)

    def same_route(self, other: "Chromosome") -> bool:
        return bool(np.array_equal(self.route, other.route))



# --- Losowa inicjalizacja ---------------------------------------------------------------------------
def random_chromosome(
    n: int,
    rng: np.random.Generator,
    cost_model: Optional[CostModel] = None,
) -> Chromosome:
    """
    Losowa permutacja 0..n-1 (nieobciążone tasowanie przez `Generator.permutation`).
    Jeśli podano `cost_model`, fitness liczymy od razu.
    """
    ch = Chromosome(rng.permutation(n))
    if cost_model is not None:
        ch.evaluate(cost_model)
    return ch
