"""
Plik: tspga/stats.py

Cel i rola w projekcie
----------------------
Statystyki przebiegu i ich agregacja:
- `GenerationStats` - niezmienny zrzut (best/worst/average) po każdej generacji,
- `RunResult` - pełny ślad jednego uruchomienia + najlepszy chromosom,
- funkcje agregujące wiele runów (średnia, najlepszy run, najgorszy run, zakres,
  wszystkie serie) - wejście dla zewnętrznego rysowania wykresów.

Jak łączy się z resztą:
- `population.py` liczy `GenerationStats` dla bieżącej populacji,
- `engine.py` dopisuje je do historii i na końcu buduje `RunResult`,
- `runner.py` zbiera `RunResult` i woła `aggregate(...)`.

Uwagi:
- Agregacja to czyste post-processing - nie wpływa na przebieg runów.
- Serie o różnej długości (run zatrzymany limitem czasu) przycinamy do najkrótszej.
- Remis przy wyborze najlepszego/najgorszego runu: niższy indeks na liście.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .chromosome import Chromosome
from .model import TraceConfig


STATISTICS = ("average", "best", "worst")
PLOTS = ("average", "display_all", "best", "worst", "range")


@dataclass(frozen=True)
class GenerationStats:
    best: float
    worst: float
    average: float

    def value(self, statistic: str) -> float:
        if statistic not in STATISTICS:
            raise ValueError(f"Nieznana statystyka: {statistic}")
        return getattr(self, statistic)


@dataclass
class RunResult:
    """Wynik jednego uruchomienia silnika."""
    run_index: int
    seed: int
    history: List[GenerationStats]
    best: Chromosome
    initial: Optional[GenerationStats] = None
    stopped_reason: str = "max_generations"
    elapsed_sec: float = 0.0

    @property
    def generations(self) -> int:
        return len(self.history)

    @property
    def best_cost(self) -> float:
        return self.best.fitness()

    def series(self, statistic: str = "best") -> np.ndarray:
        """Wektor wybranej statystyki per generacja."""
        return np.array([s.value(statistic) for s in self.history], dtype=np.float64)

    def to_dict(self, trace: Optional[TraceConfig] = None) -> Dict[str, Any]:
        """Słownik gotowy do zapisania jako 1 linia w JSONL."""
        trace = trace or TraceConfig()
        out: Dict[str, Any] = {
            "run_index": self.run_index,
            "seed": self.seed,
            "gen_reached": self.generations,
            "stopped_reason": self.stopped_reason,
            "time_sec": float(self.elapsed_sec),
            "best_cost": float(self.best_cost),
            "best_route": self.best.route.tolist(),
        }
        if self.initial is not None:
            out["initial"] = {"best": self.initial.best, "worst": self.initial.worst, "average": self.initial.average}
        # Trace dopisujemy tylko jeśli włączony (żeby wyniki nie były gigantyczne)
        if trace.store_best_per_gen:
            out["trace_best_cost"] = self.series("best").tolist()
        if trace.store_worst_per_gen:
            out["trace_worst_cost"] = self.series("worst").tolist()
        if trace.store_avg_per_gen:
            out["trace_avg_cost"] = self.series("average").tolist()
        return out



# --- Agregacja wielu runów ---------------------------------------------------------------------------------
def _stack(results: Sequence[RunResult], statistic: str) -> np.ndarray:
    """Macierz (R, G) wybranej statystyki; G = długość najkrótszej serii."""
    if not results:
        raise ValueError("Brak wyników do agregacji")
    series = [r.series(statistic) for r in results]
    g = min(s.shape[0] for s in series)
    return np.vstack([s[:g] for s in series]) if g > 0 else np.empty((len(series), 0))


def all_series(results: Sequence[RunResult], statistic: str = "best") -> List[np.ndarray]:
    """Tryb display-all: każda seria osobno."""
    return [r.series(statistic) for r in results]


def average_series(results: Sequence[RunResult], statistic: str = "best") -> np.ndarray:
    """Średnia po runach dla każdej generacji."""
    return _stack(results, statistic).mean(axis=0)


def best_run_series(results: Sequence[RunResult], statistic: str = "best") -> np.ndarray:
    """Seria runu z najniższą wartością końcową."""
    m = _stack(results, statistic)
    if m.shape[1] == 0:
        return m[0]
    return m[int(np.argmin(m[:, -1]))]


def worst_run_series(results: Sequence[RunResult], statistic: str = "best") -> np.ndarray:
    """Seria runu z najwyższą wartością końcową."""
    m = _stack(results, statistic)
    if m.shape[1] == 0:
        return m[0]
    return m[int(np.argmax(m[:, -1]))]


def range_series(results: Sequence[RunResult], statistic: str = "best") -> Dict[str, np.ndarray]:
    """Najlepszy, najgorszy i uśredniony przebieg jednocześnie."""
    return {
        "best": best_run_series(results, statistic),
        "worst": worst_run_series(results, statistic),
        "average": average_series(results, statistic),
    }


def aggregate(results: Sequence[RunResult], plot: str = "average", statistic: str = "best") -> Dict[str, List[float]]:
    """
    Zwróć nazwane serie do narysowania:
     - average     -> {"average": [...]}
     - best/worst  -> {"best": [...]} / {"worst": [...]}
     - range       -> {"best", "worst", "average"}
     - display_all -> {"run 1": [...], "run 2": [...], ...}
    """
    if statistic not in STATISTICS:
        raise ValueError(f"Nieznana statystyka: {statistic}")
    if plot == "average":
        out = {"average": average_series(results, statistic)}
    elif plot == "best":
        out = {"best": best_run_series(results, statistic)}
    elif plot == "worst":
        out = {"worst": worst_run_series(results, statistic)}
    elif plot == "range":
        out = range_series(results, statistic)
    elif plot == "display_all":
        out = {f"run {r.run_index + 1}": s for r, s in zip(results, all_series(results, statistic))}
    else:
        raise ValueError(f"Nieznany typ agregacji: {plot}")
    return {k: v.tolist() for k, v in out.items()}
