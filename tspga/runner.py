"""
Plik: tspga/runner.py

Cel i rola w projekcie
----------------------
To jest „kierownik” uruchomień (high-level runner) dla całego projektu.
Ten moduł:
1) Wczytuje instancję (macierz kosztów) przez `io.load_cost_model`.
2) Wykonuje serię `Params.runs` niezależnych uruchomień z różnymi seedami (`Params.seeds`).
3) Dla każdego uruchomienia:
   - inicjalizuje generator losowy NumPy (deterministycznie z seed, osobny dla runu),
   - buduje `EvolutionaryEngine` i kręci pętlę do `max_generations`,
   - zbiera trace (best/worst/avg per generacja).
4) Runy mogą iść równolegle w puli wątków (`Params.workers`) - współdzielą tylko
   niezmienny `CostModel`.
5) Zapisuje wynik każdego uruchomienia do JSONL poprzez `io.write_run_result`
   (1 linia = 1 run) i opcjonalnie zagregowane serie do JSON.

Jak łączy się z resztą:
- `cli.py` woła `run_experiment(...)`.
- `engine.py` realizuje pojedynczy przebieg, `stats.py` agreguje wyniki.

Błędy:
- błąd w runie (`RunError`) porzuca tylko ten run; pozostałe kończą się normalnie,
  a błąd trafia do `ExperimentResult.failures` (z numerem runu i generacji).
"""
from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

import numpy as np
from rich.console import Console

from .engine import EvolutionaryEngine
from .errors import RunError
from .fitness import CostModel
from .io import load_cost_model, write_json, write_run_result
from .model import Instance, Params
from .stats import GenerationStats, RunResult, aggregate


console = Console()


# --- Seedy -----------------------------------------------------------------------------------------------------
def resolve_seeds(params: Params) -> List[int]:
    """
    Lista seedów na runs:
    - jeśli seeds jest krótsze niż runs -> uzupełniamy kolejnymi liczbami (powtarzalnie).
    """
    seeds = list(params.seeds)
    if len(seeds) < params.runs:
        seeds = seeds + list(range(len(seeds), params.runs))
    return [int(s) for s in seeds[: params.runs]]



# --- Pojedynczy run ---------------------------------------------------------------------------------------------
def run_single_ga(
    cost_model: CostModel,
    params: Params,
    seed: int,
    run_index: int = 0,
    should_stop: Optional[Callable[[], bool]] = None,
    log_every: int = 0,
) -> RunResult:
    """
    Uruchom silnik dla pojedynczego seeda.

    Zwraca `RunResult`; błędy w ticku wychodzą jako `RunError`.
    """
    t0 = time.time()
    rng = np.random.default_rng(seed)
    engine = EvolutionaryEngine(cost_model, params, rng, run_index=run_index, seed=seed)

    def _log(gen: int, stats: GenerationStats) -> None:
        if gen == 1 or gen % log_every == 0:
            console.print(
                f"[[bold yellow]Run {run_index + 1}[/bold yellow]] "
                f"[[bold yellow]Generation[/bold yellow]] [bold white]{gen}/{params.max_generations}[/bold white]  "
                f"[bold green]best[/bold green] = [white]{stats.best:.3f}[/white]  "
                f"[bold green]worst[/bold green] = [white]{stats.worst:.3f}[/white]  "
                f"[bold green]avg[/bold green] = [white]{stats.average:.3f}[/white]  "
                f"[bold green]elapsed[/bold green] = [white]{time.time() - t0:.1f}s[/white]"
            )

    result = engine.run(should_stop=should_stop, on_generation=_log if log_every > 0 else None)
    result.elapsed_sec = time.time() - t0
    if result.stopped_reason != "max_generations":
        console.print(
            f"[[red]STOPPED[/red]][white]: run {run_index + 1} zatrzymany po "
            f"{result.generations} generacjach ({result.stopped_reason}).[/white]"
        )
    return result



# --- Wynik serii uruchomień --------------------------------------------------------------------------------------
@dataclass
class ExperimentResult:
    results: List[RunResult] = field(default_factory=list)
    failures: List[RunError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def aggregate(self, plot: str = "average", statistic: str = "best") -> Dict[str, List[float]]:
        return aggregate(self.results, plot=plot, statistic=statistic)



# --- Koordynator ---------------------------------------------------------------------------------------------------
class RunCoordinator:
    """
    Uruchamia `params.runs` niezależnych silników (osobne RNG, osobne populacje)
    i zbiera ich wyniki. Jedyny współdzielony obiekt to `CostModel` (tylko do odczytu).
    """

    def __init__(self, cost_model: CostModel, params: Params, time_limit_sec: float = 0.0, log_every: int = 0):
        self.cost_model = cost_model
        self.params = params
        self.time_limit_sec = time_limit_sec
        self.log_every = log_every
        self._stop = threading.Event()
        self._deadline: Optional[float] = None

    def stop(self) -> None:
        """Poproś wszystkie runy o zatrzymanie na granicy najbliższego ticka."""
        self._stop.set()

    def _should_stop(self) -> bool:
        if self._stop.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def _run_one(self, run_index: int, seed: int) -> RunResult:
        console.print(
            f"[bold green][START][/bold green] [[yellow]Run[/yellow]: [white]{run_index + 1}/{self.params.runs}[/white]] "
            f"[[yellow]Seed[/yellow]: [white]{seed}[/white]] [[yellow]n[/yellow]=[white]{self.cost_model.n_cities}[/white]]"
        )
        try:
            return run_single_ga(
                self.cost_model, self.params, seed, run_index=run_index,
                should_stop=self._should_stop, log_every=self.log_every,
            )
        except RunError:
            raise
        except Exception as e:
            raise RunError(run_index, 0, e) from e

    def run(self) -> ExperimentResult:
        if self.time_limit_sec and self.time_limit_sec > 0:
            self._deadline = time.monotonic() + self.time_limit_sec
        seeds = resolve_seeds(self.params)
        out = ExperimentResult()

        with ThreadPoolExecutor(max_workers=self.params.workers) as ex:
            futures = [ex.submit(self._run_one, r, seed) for r, seed in enumerate(seeds)]
            for fut in futures:
                try:
                    out.results.append(fut.result())
                except RunError as e:
                    console.print(f"[[red]FAILED[/red]] run {e.run_index + 1}, generacja {e.generation}: {e.cause}")
                    out.failures.append(e)

        out.results.sort(key=lambda res: res.run_index)
        return out



# --- Publiczny interfejs: uruchom eksperymenty ---------------------------------------------------------------------
def run_experiment(
    instance_path: Path,
    params: Params,
    out_path: Path,
    time_limit_sec: float = 0.0,
    log_every: int = 0,
    series_out: Optional[Path] = None,
) -> ExperimentResult:
    """
    Uruchom serię eksperymentów:
    - wczytuje instancję z instance_path (*.json / *.xml),
    - uruchamia `params.runs` przebiegów,
    - zapisuje każdy wynik do out_path jako 1 linia JSON,
    - opcjonalnie zapisuje zagregowane serie (params.report) do series_out.
    """
    instance, cost_model = load_cost_model(instance_path)
    return run_on_cost_model(instance, cost_model, params, out_path, time_limit_sec, log_every, series_out)


def run_on_cost_model(
    instance: Instance,
    cost_model: CostModel,
    params: Params,
    out_path: Path,
    time_limit_sec: float = 0.0,
    log_every: int = 0,
    series_out: Optional[Path] = None,
) -> ExperimentResult:
    coordinator = RunCoordinator(cost_model, params, time_limit_sec=time_limit_sec, log_every=log_every)
    experiment = coordinator.run()

    params_dump = params.model_dump(mode="json")
    for res in experiment.results:
        run_dict = res.to_dict(params.trace)
        # Dodatkowe pola identyfikacyjne
        run_dict["instance"] = instance.name
        run_dict["n_cities"] = cost_model.n_cities
        run_dict["params"] = params_dump
        write_run_result(run_dict, out_path)

    if series_out is not None and experiment.results:
        write_json(
            {
                "instance": instance.name,
                "plot": params.report.plot,
                "statistic": params.report.statistic,
                "series": experiment.aggregate(params.report.plot, params.report.statistic),
            },
            series_out,
        )
    return experiment
