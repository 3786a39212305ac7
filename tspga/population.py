"""
Plik: tspga/population.py

Cel i rola w projekcie
----------------------
Populacja dla algorytmu steady-state:
- uporządkowana (kolejność wstawiania, NIE fitness) lista policzonych chromosomów,
- po inicjalizacji rozmiar jest stały: każda wymiana usuwa dokładnie jednego
  osobnika i wstawia dokładnie jednego,
- szybki dostęp do najlepszego / najgorszego osobnika i statystyk generacji.

Założenia:
- Remisy (kilka osobników o tym samym koszcie) rozstrzyga najniższy indeks -
  zarówno dla „najlepszego”, jak i „najgorszego”.
- Populacja należy do jednego silnika; nie jest współdzielona między runami.
"""
from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

import numpy as np

from .chromosome import Chromosome, random_chromosome
from .errors import FitnessNotEvaluatedError
from .fitness import CostModel
from .stats import GenerationStats


class Population:
    def __init__(self, chromosomes: Optional[Iterable[Chromosome]] = None):
        self._members: List[Chromosome] = []
        self._costs: List[float] = []
        for ch in chromosomes or ():
            self.add(ch)

    @classmethod
    def random(cls, size: int, cost_model: CostModel, rng: np.random.Generator) -> "Population":
        """Stwórz populację startową: `size` losowych permutacji z policzonym fitnessem."""
        n = cost_model.n_cities
        return cls(random_chromosome(n, rng, cost_model) for _ in range(size))

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Chromosome]:
        return iter(self._members)

    def __getitem__(self, index: int) -> Chromosome:
        return self._members[index]

    def add(self, chromosome: Chromosome) -> None:
        """Dopisz osobnika na koniec (tylko z policzonym fitnessem)."""
        self._costs.append(chromosome.fitness())
        self._members.append(chromosome)

    def replace(self, index: int, child: Chromosome) -> Chromosome:
        """Wstaw `child` na pozycję `index`, zwróć usuniętego osobnika."""
        if not child.is_evaluated:
            raise FitnessNotEvaluatedError("Do populacji można wstawić tylko policzonego osobnika")
        evicted = self._members[index]
        self._members[index] = child
        self._costs[index] = child.fitness()
        return evicted

    def replace_worst(self, child: Chromosome) -> int:
        """Zastąp najgorszego osobnika dzieckiem; zwróć indeks wymiany."""
        i = self.worst_index()
        self.replace(i, child)
        return i

    def costs(self) -> np.ndarray:
        return np.asarray(self._costs, dtype=np.float64)

    def best_index(self) -> int:
        return int(np.argmin(self._costs))

    def worst_index(self) -> int:
        return int(np.argmax(self._costs))

    def best(self) -> Chromosome:
        return self._members[self.best_index()]

    def worst(self) -> Chromosome:
        return self._members[self.worst_index()]

    def stats(self) -> GenerationStats:
        c = self.costs()
        return GenerationStats(best=float(c.min()), worst=float(c.max()), average=float(c.mean()))
