"""
Plik: tspga/model.py

Cel i rola w projekcie
----------------------
Zawiera *modele danych* (Pydantic v2) używane w całym projekcie:
- `Instance` - reprezentacja wejściowej instancji TSP (nazwa, opis, macierz kosztów),
- `Params` i pomocnicze konfiguracje (`ReportConfig`, `TraceConfig`) - scalają
  wszystkie parametry algorytmu i uruchomienia w *jednym, walidowanym miejscu*.

Jak łączy się z resztą:
- `tspga/io.py` korzysta z tych modeli do walidacji danych wczytywanych z plików,
- `tspga/cli.py` przekształca JSON config w obiekt `Params`, nakłada nadpisania z CLI,
- `tspga/engine.py` i `tspga/runner.py` używają `Params` w czasie ewolucji.

Powiązanie z projektem:
- Pola odpowiadają przykładowemu `experiments/configs/base.json`.
- Dzięki Pydantic unikamy cichych błędów typu literówki w nazwach pól w configu,
  a wartości spoza zakresu odrzucają cały run (bez przycinania).
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .errors import ConfigurationError, InputDataError


CrossoverName = Literal["fix", "ordered"]
MutationName = Literal["single", "multiple", "inversion"]
PlotName = Literal["average", "display_all", "best", "worst", "range"]
StatisticName = Literal["average", "best", "worst"]



# --- Model instancji --------------------------------------------------------------------------
class Instance(BaseModel):
    """Instancja problemu: pełny graf z symetryczną macierzą kosztów"""
    name: str = "unnamed"
    source: str = ""
    description: str = ""
    double_precision: Optional[float] = None
    ignored_digits: Optional[int] = None
    matrix: List[List[float]]
    meta: Optional[Dict[str, Any]] = None

    @property
    def n_cities(self) -> int:
        """Zwraca liczbę miast w instancji"""
        return len(self.matrix)

    @field_validator("matrix")
    @classmethod
    def _validate_matrix(cls, m: List[List[float]]) -> List[List[float]]:
        """Macierz: kwadratowa, N >= 2, symetryczna, zero na przekątnej, koszty >= 0."""
        n = len(m)
        if n < 2:
            raise ValueError("macierz kosztów musi mieć co najmniej 2 miasta")
        for i, row in enumerate(m):
            if len(row) != n:
                raise ValueError(f"wiersz {i} ma długość {len(row)}, oczekiwano {n}")
        for i in range(n):
            if m[i][i] != 0:
                raise ValueError(f"koszt na przekątnej [{i}][{i}] musi być 0")
            for j in range(i + 1, n):
                a, b = m[i][j], m[j][i]
                if not (math.isfinite(a) and a >= 0):
                    raise ValueError(f"koszt [{i}][{j}] musi być skończony i >= 0")
                if not math.isclose(a, b, rel_tol=1e-9, abs_tol=1e-12):
                    raise ValueError(f"macierz nie jest symetryczna: [{i}][{j}]={a} != [{j}][{i}]={b}")
        return m



# --- Konfiguracja parametrów -------------------------------------------------------------------
class ReportConfig(BaseModel):
    """Co i jak agregować z wielu uruchomień (wejście dla zewnętrznego wykresu)"""
    plot: PlotName = "average"
    statistic: StatisticName = "best"


class TraceConfig(BaseModel):
    """Co logować w śladzie przebiegu"""
    store_best_per_gen: bool = True
    store_worst_per_gen: bool = False
    store_avg_per_gen: bool = True


class Params(BaseModel):
    """Główny zbiór parametrów algorytmu i uruchomienia"""
    population: int = Field(50, ge=10, description="Rozmiar populacji (>=10)")
    tournament: int = Field(5, ge=1, description="Rozmiar turnieju, 1..population")

    crossover: CrossoverName = "fix"
    mutation: MutationName = "single"
    swaps: int = Field(2, ge=2, description="Liczba zamian dla mutacji multiple")
    replacement: Literal["worst", "worst_if_better"] = "worst"

    max_generations: int = Field(10000, ge=1)

    runs: int = Field(1, ge=1)
    seeds: List[int] = Field(default_factory=lambda: [0])
    workers: int = Field(1, ge=1, description="Liczba wątków dla niezależnych runów")

    report: ReportConfig = Field(default_factory=ReportConfig)                      # type: ignore
    trace: TraceConfig = Field(default_factory=TraceConfig)                         # type: ignore

    @model_validator(mode="after")
    def _validate_tournament(self) -> "Params":
        """Turniej nie może być większy niż populacja."""
        if self.tournament > self.population:
            raise ValueError(
                f"tournament ({self.tournament}) nie może przekraczać population ({self.population})"
            )
        return self



# --- Walidacja z mapowaniem błędów ------------------------------------------------------------------
def parse_params(data: Dict[str, Any]) -> Params:
    """Zwaliduj słownik konfiguracji; każdy błąd zamieniamy na `ConfigurationError`."""
    try:
        return Params.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Niepoprawna konfiguracja: {e}") from e


def parse_instance(data: Dict[str, Any]) -> Instance:
    """Zwaliduj słownik instancji; każdy błąd zamieniamy na `InputDataError`."""
    try:
        return Instance.model_validate(data)
    except ValidationError as e:
        raise InputDataError(f"Niepoprawna instancja: {e}") from e
