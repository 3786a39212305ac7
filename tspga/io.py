"""
Plik: tspga/io.py

Cel i rola w projekcie
----------------------
Ten moduł odpowiada za *wszystkie operacje wejścia/wyjścia*:
- wczytywanie instancji TSP z plików JSON (`{"name": ..., "matrix": [[...]]}`)
  oraz XML w formacie TSPLIB (`<travellingSalesmanProblemInstance>`),
- budowę `CostModel` z wczytanej instancji,
- zapis wyników pojedynczego uruchomienia do plików *.jsonl (1 linia = 1 wynik),
- zapis zagregowanych serii (dla zewnętrznego rysowania wykresów) do JSON.

Jak łączy się z resztą:
- korzysta z modeli z `tspga/model.py` (Pydantic) do walidacji struktur danych,
- `tspga/runner.py` i `tspga/cli.py` wołają funkcje z tego pliku.

Błędy:
- nieczytelny plik, nieobsługiwany format, brakująca krawędź, niepoprawna
  macierz -> `InputDataError` (z nazwą pliku w komunikacie).
"""
from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import orjson

from .errors import InputDataError
from .fitness import CostModel
from .model import Instance, parse_instance



# -- JSON utils -------------------------------------------------------------------------------------
def _loads(s: Union[str, bytes]) -> Any:
    """Parse JSON string/bytes -> obiekt"""
    return orjson.loads(s)

def _dumps(obj: Any) -> str:
    """Dump obiekt -> JSON string (UTF-8, obsługuje też tablice NumPy)."""
    return orjson.dumps(obj, option=orjson.OPT_SERIALIZE_NUMPY).decode("utf-8")

def read_json(path: Union[str, Path]) -> Dict:
    """Wczytuje plik JSON i zwraca jego zawartość jako słownik."""
    p = Path(path)
    try:
        return _loads(p.read_bytes())
    except OSError as e:
        raise InputDataError(f"Nie można odczytać pliku {p}: {e}") from e
    except orjson.JSONDecodeError as e:
        raise InputDataError(f"Niepoprawny JSON w {p}: {e}") from e



# -- XML (TSPLIB) ------------------------------------------------------------------------------------
def _text(root: ET.Element, tag: str, default: str = "") -> str:
    node = root.find(tag)
    return (node.text or "").strip() if node is not None else default

def parse_tsplib_xml(text: Union[str, bytes]) -> Dict[str, Any]:
    """
    Zamień XML TSPLIB na słownik zgodny z `Instance`:
     - i-ty <vertex> to miasto i,
     - <edge cost="c">j</edge> to koszt przejazdu i -> j,
     - przekątna = 0; każda para (i, j), i != j, musi mieć krawędź.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise InputDataError(f"Niepoprawny XML: {e}") from e

    vertices = root.findall("./graph/vertex")
    n = len(vertices)
    if n < 2:
        raise InputDataError(f"Instancja musi mieć co najmniej 2 miasta, znaleziono {n}")

    matrix: List[List[float]] = [[0.0] * n for _ in range(n)]
    seen = [[i == j for j in range(n)] for i in range(n)]
    for i, vertex in enumerate(vertices):
        for edge in vertex.findall("edge"):
            try:
                j = int((edge.text or "").strip())
                cost = float(edge.attrib["cost"])
            except (KeyError, ValueError) as e:
                raise InputDataError(f"Niepoprawna krawędź w mieście {i}: {ET.tostring(edge)!r}") from e
            if not 0 <= j < n:
                raise InputDataError(f"Krawędź {i} -> {j} wskazuje miasto spoza zakresu 0..{n - 1}")
            matrix[i][j] = cost
            seen[i][j] = True

    missing = [(i, j) for i in range(n) for j in range(n) if not seen[i][j]]
    if missing:
        raise InputDataError(f"Graf nie jest pełny, brakujące krawędzie np.: {missing[:5]}")

    data: Dict[str, Any] = {
        "name": _text(root, "name", "unnamed") or "unnamed",
        "source": _text(root, "source"),
        "description": _text(root, "description"),
        "matrix": matrix,
    }
    try:
        if root.find("doublePrecision") is not None:
            data["double_precision"] = float(_text(root, "doublePrecision"))
        if root.find("ignoredDigits") is not None:
            data["ignored_digits"] = int(_text(root, "ignoredDigits"))
    except ValueError as e:
        raise InputDataError(f"Niepoprawne metadane precyzji w XML: {e}") from e
    return data



# -- Wczytywanie instancji ---------------------------------------------------------------------------
def load_instance_from_dict(d: Dict) -> Instance:
    """Zamień słownik na zwalidowaną instancję `Instance` (Pydantic)."""
    return parse_instance(d)

def load_instance(path: Union[str, Path]) -> Instance:
    """
    Wczytaj instancję:
     - *.json -> słownik z polem `matrix`
     - *.xml  -> format TSPLIB
    """
    p = Path(path)
    if p.suffix == ".json":
        return load_instance_from_dict(read_json(p))
    if p.suffix == ".xml":
        try:
            raw = p.read_bytes()
        except OSError as e:
            raise InputDataError(f"Nie można odczytać pliku {p}: {e}") from e
        return load_instance_from_dict(parse_tsplib_xml(raw))
    raise InputDataError(f"Nieobsługiwany format pliku: {p.suffix}. Obsługiwane: .json, .xml")

def load_cost_model(path: Union[str, Path]) -> Tuple[Instance, CostModel]:
    """Wczytaj instancję i zbuduj z niej `CostModel`."""
    instance = load_instance(path)
    return instance, CostModel.from_instance(instance)



# -- Zapis wyników ---------------------------------------------------------------------------------------
def write_run_result(run: Dict, out_path: Union[str, Path]) -> None:
    """Dopisz pojedynczy wynik (dict) jako jedną linię w wynikowym JSONL"""
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    line = _dumps(run)
    with p.open("a", encoding="utf-8") as f:
        f.write(line)
        f.write("\n")

def write_json(obj: Dict, out_path: Union[str, Path]) -> None:
    """Zapisz słownik jako plik JSON (nadpisuje)."""
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(orjson.dumps(obj, option=orjson.OPT_INDENT_2 | orjson.OPT_SERIALIZE_NUMPY))

def iter_jsonl(path: Union[str, Path]):
    """Iteruj po rekordach pliku JSONL (1 linia = 1 wynik), pomijając puste linie."""
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            yield _loads(line)
