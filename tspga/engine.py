"""
Plik: tspga/engine.py

Cel i rola w projekcie
----------------------
„Silnik” algorytmu ewolucyjnego steady-state dla jednego uruchomienia.

Maszyna stanów: INITIALIZING -> RUNNING -> TERMINATED
- INITIALIZING: budujemy populację P losowych tras (fitness przez CostModel),
- RUNNING: każdy tick = jedna generacja = jedna wymiana w populacji:
  1) dwa niezależne turnieje -> rodzice A i B,
  2) krzyżowanie (operator wybrany raz, przy budowie silnika) -> jedno dziecko,
  3) mutacja dziecka (cache fitnessu unieważniony),
  4) jedno przeliczenie fitnessu dziecka,
  5) dziecko zastępuje najgorszego osobnika,
  6) zapis `GenerationStats` dla zaktualizowanej populacji,
- TERMINATED: osiągnięto `max_generations`; dalsze `step()` jest błędem.

Błędy w ticku (np. operator zwrócił niepoprawną permutację) to błędy programisty:
nie naprawiamy ich po cichu, tylko opakowujemy w `RunError` z numerem runu i generacji.
Zatrzymanie z zewnątrz (`should_stop`) jest sprawdzane wyłącznie między tickami,
więc populacja zawsze ma pełny rozmiar i poprawne permutacje.
"""
from __future__ import annotations

import enum
import time
from typing import Callable, List, Optional

import numpy as np

from .chromosome import Chromosome
from .errors import ConfigurationError, EngineStateError, RunError
from .fitness import CostModel
from .ga import resolve_crossover, resolve_mutation, select_parents
from .model import Params
from .population import Population
from .stats import GenerationStats, RunResult


class EngineState(enum.Enum):
    INITIALIZING = "initializing"
    RUNNING = "running"
    TERMINATED = "terminated"


class EvolutionaryEngine:
    def __init__(
        self,
        cost_model: CostModel,
        params: Params,
        rng: np.random.Generator,
        run_index: int = 0,
        seed: int = 0,
    ):
        self.state = EngineState.INITIALIZING
        if params.tournament > params.population:
            raise ConfigurationError(
                f"tournament ({params.tournament}) nie może przekraczać population ({params.population})"
            )
        self.cost_model = cost_model
        self.params = params
        self.rng = rng
        self.run_index = run_index
        self.seed = seed

        self._crossover = resolve_crossover(params.crossover)
        self._mutate = resolve_mutation(params.mutation, params.swaps)

        self.generation = 0
        self.history: List[GenerationStats] = []
        self.stopped_reason: Optional[str] = None
        try:
            self.population = Population.random(params.population, cost_model, rng)
        except Exception as e:
            raise RunError(run_index, 0, e) from e
        self.initial_stats = self.population.stats()
        self.state = EngineState.RUNNING

    @property
    def best(self) -> Chromosome:
        return self.population.best()

    def _breed(self) -> Chromosome:
        """Selekcja, krzyżowanie, mutacja i jedno przeliczenie fitnessu."""
        parent_a, parent_b = select_parents(self.population, self.params.tournament, self.rng)
        child = Chromosome(self._crossover(parent_a.route, parent_b.route, self.rng))
        self._mutate(child.route, self.rng)
        child.invalidate()
        child.evaluate(self.cost_model)
        return child

    def step(self) -> GenerationStats:
        """Wykonaj jedną generację (jedną wymianę steady-state)."""
        if self.state is not EngineState.RUNNING:
            raise EngineStateError(f"step() niedozwolone w stanie {self.state.value}")
        gen = self.generation + 1
        try:
            child = self._breed()
        except Exception as e:
            raise RunError(self.run_index, gen, e) from e

        if self.params.replacement == "worst" or child.fitness() <= self.population.worst().fitness():
            self.population.replace_worst(child)

        stats = self.population.stats()
        self.history.append(stats)
        self.generation = gen
        if self.generation >= self.params.max_generations:
            self.stopped_reason = "max_generations"
            self.state = EngineState.TERMINATED
        return stats

    def run(
        self,
        should_stop: Optional[Callable[[], bool]] = None,
        on_generation: Optional[Callable[[int, GenerationStats], None]] = None,
    ) -> RunResult:
        """Kręć pętlę generacji do `max_generations` lub do sygnału stopu (tylko między tickami)."""
        t0 = time.time()
        while self.state is EngineState.RUNNING:
            if should_stop is not None and should_stop():
                self.stopped_reason = "stopped"
                self.state = EngineState.TERMINATED
                break
            stats = self.step()
            if on_generation is not None:
                on_generation(self.generation, stats)
        return self.result(elapsed_sec=time.time() - t0)

    def result(self, elapsed_sec: float = 0.0) -> RunResult:
        return RunResult(
            run_index=self.run_index,
            seed=self.seed,
            history=list(self.history),
            best=self.population.best().copy(),
            initial=self.initial_stats,
            stopped_reason=self.stopped_reason or "running",
            elapsed_sec=elapsed_sec,
        )
