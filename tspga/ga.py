"""
Plik: tspga/ga.py

Cel i rola w projekcie
----------------------
Ten moduł implementuje operatory algorytmu ewolucyjnego dla TSP:
- selekcja rodziców (turniejowa, bez zwracania w obrębie jednego turnieju),
- krzyżowanie: „crossover with fix” oraz „ordered crossover”,
- mutacja: single swap, multiple swap, inversion.

Jak łączy się z resztą:
- `engine.py` raz, przy budowie silnika, wybiera operatory przez
  `resolve_crossover(...)` / `resolve_mutation(...)`, a potem woła je w każdym ticku,
- operatory nie znają populacji ani kosztów - działają tylko na trasach.

Założenia:
- Trasa to `np.ndarray` (n,) int64 będący permutacją 0..n-1.
- Krzyżowanie jest czyste (zwraca nową tablicę), mutacja zmienia trasę w miejscu
  i ją zwraca (tak jak bit-flip w wersji plecakowej).
- Każdy operator tylko przestawia istniejące geny, więc wynik zawsze jest permutacją.
- RNG jest obiektem `numpy.random.Generator` przekazanym z `runner.py`.
"""
from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple

import numpy as np

from .chromosome import Chromosome
from .errors import ConfigurationError, InvalidTourError

if TYPE_CHECKING:
    from .population import Population


Cut = Tuple[int, int]
CrossoverFn = Callable[[np.ndarray, np.ndarray, np.random.Generator], np.ndarray]
MutationFn = Callable[[np.ndarray, np.random.Generator], np.ndarray]



# --- Punkty cięcia ----------------------------------------------------------------------------------------
def draw_cut_points(n: int, rng: np.random.Generator) -> Cut:
    """Dwa niezależne losowania z [0, n), posortowane: 0 <= a <= b < n (a == b dozwolone)."""
    a, b = sorted(int(x) for x in rng.integers(0, n, size=2))
    return a, b


def _prepare(p1: np.ndarray, p2: np.ndarray, rng: np.random.Generator, cut: Optional[Cut]):
    p1 = np.asarray(p1, dtype=np.int64)
    p2 = np.asarray(p2, dtype=np.int64)
    n = p1.shape[0]
    if p2.shape[0] != n:
        raise InvalidTourError(f"Rodzice mają różne długości: {n} i {p2.shape[0]}")
    a, b = draw_cut_points(n, rng) if cut is None else cut
    if not 0 <= a <= b < n:
        raise ValueError(f"Niepoprawne punkty cięcia ({a}, {b}) dla n={n}")
    return p1, p2, n, a, b



# --- Krzyżowanie -----------------------------------------------------------------------------------------
def crossover_fix(
    p1: np.ndarray, p2: np.ndarray, rng: np.random.Generator, cut: Optional[Cut] = None
) -> np.ndarray:
    """
    Crossover with fix:
     - fragment [a, b] kopiujemy z rodzica A na te same pozycje,
     - pozostałe pozycje dostają geny rodzica B z tych samych pozycji,
       o ile dane miasto nie trafiło już do dziecka z fragmentu A,
     - kolizje „naprawiamy”: brakujące miasta (w kolejności z B) wpisujemy
       w kolejne wolne pozycje dziecka.
    """
    p1, p2, n, a, b = _prepare(p1, p2, rng, cut)

    child = np.full(n, -1, dtype=np.int64)
    placed = np.zeros(n, dtype=bool)
    child[a:b + 1] = p1[a:b + 1]
    placed[p1[a:b + 1]] = True

    outside = np.ones(n, dtype=bool)
    outside[a:b + 1] = False
    keep = outside & ~placed[p2]
    child[keep] = p2[keep]
    placed[p2[keep]] = True

    missing = p2[~placed[p2]]
    child[np.flatnonzero(child < 0)] = missing
    return child


def crossover_ordered(
    p1: np.ndarray, p2: np.ndarray, rng: np.random.Generator, cut: Optional[Cut] = None
) -> np.ndarray:
    """
    Ordered crossover (OX):
     - fragment [a, b] kopiujemy z rodzica A,
     - resztę uzupełniamy skanując B od pozycji b+1 (cyklicznie), pomijając
       miasta z fragmentu, i wpisujemy od pozycji b+1 (też cyklicznie).
    """
    p1, p2, n, a, b = _prepare(p1, p2, rng, cut)

    child = np.full(n, -1, dtype=np.int64)
    in_slice = np.zeros(n, dtype=bool)
    child[a:b + 1] = p1[a:b + 1]
    in_slice[p1[a:b + 1]] = True

    order = np.roll(p2, -(b + 1))
    fill = order[~in_slice[order]]
    positions = np.arange(b + 1, b + 1 + fill.shape[0]) % n
    child[positions] = fill
    return child



# --- Mutacja -------------------------------------------------------------------------------------------------
def swap(route: np.ndarray, i: int, j: int) -> np.ndarray:
    """Zamień miasta na pozycjach i, j (w miejscu)."""
    route[[i, j]] = route[[j, i]]
    return route


def mutate_single_swap(route: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Single swap: dwie różne losowe pozycje, zamiana miast."""
    i, j = rng.choice(route.shape[0], size=2, replace=False)
    return swap(route, int(i), int(j))


def mutate_multiple_swap(route: np.ndarray, rng: np.random.Generator, k: int = 2) -> np.ndarray:
    """Multiple swap: k niezależnych single swapów (pozycje mogą się powtarzać między swapami)."""
    for _ in range(k):
        mutate_single_swap(route, rng)
    return route


def invert(route: np.ndarray, a: int, b: int) -> np.ndarray:
    """Odwróć fragment [a, b] włącznie (w miejscu). Dwukrotne wywołanie przywraca trasę."""
    route[a:b + 1] = route[a:b + 1][::-1].copy()
    return route


def mutate_inversion(route: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Inversion: losowe a < b, odwracamy fragment między nimi."""
    a, b = sorted(int(x) for x in rng.choice(route.shape[0], size=2, replace=False))
    return invert(route, a, b)



# --- Wybór operatorów (zamknięty zbiór strategii) --------------------------------------------------------------
CROSSOVERS: Dict[str, CrossoverFn] = {
    "fix": crossover_fix,
    "ordered": crossover_ordered,
}

MUTATIONS: Dict[str, MutationFn] = {
    "single": mutate_single_swap,
    "multiple": mutate_multiple_swap,
    "inversion": mutate_inversion,
}


def resolve_crossover(name: str) -> CrossoverFn:
    """Wybierz operator krzyżowania zgodnie z params.crossover."""
    try:
        return CROSSOVERS[name]
    except KeyError:
        raise ConfigurationError(f"Nieznany operator crossover: {name}") from None


def resolve_mutation(name: str, swaps: int = 2) -> MutationFn:
    """Wybierz operator mutacji zgodnie z params.mutation (dla multiple - z liczbą zamian)."""
    if name not in MUTATIONS:
        raise ConfigurationError(f"Nieznany operator mutacji: {name}")
    if name == "multiple":
        return partial(mutate_multiple_swap, k=swaps)
    return MUTATIONS[name]



# --- Selekcja --------------------------------------------------------------------------------------------
def tournament_select(population: "Population", k: int, rng: np.random.Generator) -> Chromosome:
    """
    Wybierz jednego rodzica metodą turniejową.
     - losujemy k *różnych* kandydatów (bez zwracania),
     - wygrywa ten o najmniejszym koszcie,
     - remis rozstrzyga najniższy indeks w populacji.
    Zwraca referencję do osobnika w populacji (nie kopię).
    """
    size = len(population)
    if not 1 <= k <= size:
        raise ConfigurationError(f"Rozmiar turnieju {k} poza zakresem [1, {size}]")
    idx = np.sort(rng.choice(size, size=k, replace=False))
    costs = population.costs()[idx]
    return population[int(idx[np.argmin(costs)])]


def select_parents(population: "Population", k: int, rng: np.random.Generator) -> Tuple[Chromosome, Chromosome]:
    """Dwa niezależne turnieje (ten sam osobnik może wygrać oba)."""
    return tournament_select(population, k, rng), tournament_select(population, k, rng)
