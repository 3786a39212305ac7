"""
Plik: tspga/fitness.py

Cel i rola w projekcie
----------------------
Ten moduł zawiera całą logikę „matematyczną” dla problemu komiwojażera:
- `CostModel` - opakowanie macierzy kosztów N x N (tylko do odczytu),
- liczenie kosztu trasy (cyklu) dla pojedynczego osobnika, łącznie z krawędzią
  zamykającą (ostatnie miasto -> pierwsze),
- sprawdzanie, czy trasa jest poprawną permutacją 0..N-1.

Jak łączy się z innymi plikami:
- `chromosome.py` woła `CostModel.tour_cost(...)`, żeby policzyć i zapamiętać fitness,
- `engine.py` dostaje jeden `CostModel` współdzielony przez wszystkie runy.

Założenia / konwencje:
- Macierz jest już zwalidowana (symetria, zero na przekątnej) przez `model.Instance`;
  tutaj sprawdzamy tylko kształt (fail closed przy niezgodnym wymiarze).
- Tablica jest oznaczona jako niezapisywalna, więc współdzielenie między wątkami
  nie wymaga blokad.
- Funkcje są „czyste” (nie robią I/O i nie losują).
"""
from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from .errors import InputDataError, InvalidTourError
from .model import Instance



# --- Walidacja permutacji ---------------------------------------------------------------------------
def is_permutation(route: Union[np.ndarray, Sequence[int]], n: int) -> bool:
  """Sprawdź czy route zawiera każde miasto 0..n-1 dokładnie raz"""
  r = np.asarray(route)
  if r.ndim != 1 or r.shape[0] != n:
    return False
  if n == 0:
    return True
  if not np.issubdtype(r.dtype, np.integer):
    return False
  if r.min() < 0 or r.max() >= n:
    return False
  return bool(np.all(np.bincount(r, minlength=n) == 1))


def check_permutation(route: Union[np.ndarray, Sequence[int]], n: int) -> None:
  """Rzuć `InvalidTourError`, jeśli route nie jest permutacją 0..n-1"""
  if not is_permutation(route, n):
    raise InvalidTourError(f"Trasa nie jest permutacją 0..{n - 1}: {np.asarray(route).tolist()}")



# --- Model kosztów ----------------------------------------------------------------------------------
class CostModel:
  """
  Macierz kosztów przejazdu między miastami.

  Obiekt jest niezmienny po utworzeniu; jeden egzemplarz może być
  współdzielony przez wszystkie równoległe uruchomienia.
  """

  def __init__(self, matrix: Union[np.ndarray, Sequence[Sequence[float]]]):
    m = np.array(matrix, dtype=np.float64)
    if m.ndim != 2 or m.shape[0] != m.shape[1]:
      raise InputDataError(f"Macierz kosztów musi być kwadratowa, otrzymano kształt {m.shape}")
    if m.shape[0] < 2:
      raise InputDataError("Macierz kosztów musi mieć co najmniej 2 miasta")
    m.setflags(write=False)
    self._matrix = m

  @classmethod
  def from_instance(cls, instance: Instance) -> "CostModel":
    """Zbuduj model kosztów z obiektu Instance"""
    return cls(instance.matrix)

  @property
  def matrix(self) -> np.ndarray:
    return self._matrix

  @property
  def n_cities(self) -> int:
    return int(self._matrix.shape[0])

  def __len__(self) -> int:
    return self.n_cities

  def __repr__(self) -> str:
    return f"CostModel(n_cities={self.n_cities})"

  def tour_cost(self, tour) -> float:
    """
    Zwróć łączny koszt cyklu: suma cost[r[i]][r[i+1]] + krawędź zamykająca.

    `tour` może być obiektem `Chromosome` (bierzemy jego `route`) lub dowolną
    sekwencją indeksów miast.
    """
    route = np.asarray(getattr(tour, "route", tour))
    check_permutation(route, self.n_cities)
    nxt = np.roll(route, -1)
    return float(self._matrix[route, nxt].sum())
