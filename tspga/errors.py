"""
Plik: tspga/errors.py

Cel i rola w projekcie
----------------------
Wspólna hierarchia wyjątków dla całego pakietu:
- `InvalidTourError`    - trasa nie jest permutacją 0..N-1 (naruszenie kontraktu),
- `ConfigurationError`  - parametry spoza dozwolonego zakresu (odrzucamy cały run),
- `InputDataError`      - błędna macierz kosztów / plik wejściowy,
- `RunError`            - opakowanie błędu z konkretnego uruchomienia
                          (indeks runu + numer generacji).

Jak łączy się z resztą:
- `fitness.py` i `chromosome.py` rzucają `InvalidTourError`,
- `model.py` zamienia błędy walidacji Pydantic na `ConfigurationError`/`InputDataError`,
- `engine.py` opakowuje każdy błąd z ticka w `RunError`,
- `runner.py` zbiera `RunError` i nie przerywa pozostałych uruchomień.
"""
from __future__ import annotations

from typing import Optional


class TSPError(Exception):
    """Bazowy wyjątek pakietu."""


class InvalidTourError(TSPError):
    """Trasa nie jest poprawną permutacją miast."""


class ConfigurationError(TSPError, ValueError):
    """Niepoprawna konfiguracja algorytmu lub uruchomienia."""


class InputDataError(TSPError, ValueError):
    """Niepoprawne dane wejściowe (macierz kosztów, plik instancji)."""


class FitnessNotEvaluatedError(TSPError):
    """Odczyt fitnessu chromosomu, który nie został (ponownie) policzony."""


class EngineStateError(TSPError):
    """Operacja niedozwolona w bieżącym stanie silnika."""


class RunError(TSPError):
    """Błąd pojedynczego uruchomienia z kontekstem do diagnozy."""

    def __init__(self, run_index: int, generation: int, cause: Optional[BaseException] = None):
        self.run_index = run_index
        self.generation = generation
        self.cause = cause
        super().__init__(f"run {run_index}, generacja {generation}: {cause!r}")
