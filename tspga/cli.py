"""
Plik: tspga/cli.py

Cel i rola w projekcie
----------------------
Interfejs wiersza poleceń (CLI) do uruchamiania eksperymentów:
- Wczytuje plik konfiguracyjny (np. `experiments/configs/base.json`) - opcjonalnie,
- Pozwala *nadpisać* wybrane parametry z linii poleceń (np. `--pop`, `--tournament` itd.),
- Wczytuje instancję z `data/instances/*.json` lub `*.xml` (TSPLIB),
- Uruchamia serię runów przez `runner.run_on_cost_model`, dopisuje wyniki do
  `experiments/results/*.jsonl` i drukuje tabelę podsumowania.

Jak łączy się z resztą:
- Używa `tspga/io.py` do I/O i `tspga/model.py` do walidacji configu,
- Błędy konfiguracji / danych kończą program z kodem 2 (zanim ruszy jakikolwiek run),
  nieudane runy - z kodem 1.

Powiązanie z projektem:
- Komenda przewodnia: `tspga run-ga --instance ... --config ... --out ...`
- Dzięki nadpisaniom można szybko robić siatki parametrów bez pisania nowych plików.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.table import Table

from .errors import ConfigurationError, InputDataError
from .io import load_cost_model, read_json
from .model import Params, parse_params
from .runner import ExperimentResult, console, run_on_cost_model


app = typer.Typer(add_completion=False, help="CLI do uruchamiania steady-state GA dla problemu komiwojażera.")


def _merge_overrides(
    params: Params,
    pop: Optional[int],
    tournament: Optional[int],
    crossover: Optional[str],
    mutation: Optional[str],
    swaps: Optional[int],
    replacement: Optional[str],
    max_generations: Optional[int],
    runs: Optional[int],
    workers: Optional[int],
    plot: Optional[str],
    statistic: Optional[str],
    seeds_csv: Optional[str],
) -> Params:
    """Zastosuj ewentualne nadpisania z linii poleceń do obiektu Params."""
    data = params.model_dump()

    if pop is not None:
        data["population"] = pop
    if tournament is not None:
        data["tournament"] = tournament
    if crossover is not None:
        data["crossover"] = crossover
    if mutation is not None:
        data["mutation"] = mutation
    if swaps is not None:
        data["swaps"] = swaps
    if replacement is not None:
        data["replacement"] = replacement
    if max_generations is not None:
        data["max_generations"] = max_generations
    if runs is not None:
        data["runs"] = runs
    if workers is not None:
        data["workers"] = workers

    if plot is not None:
        data["report"]["plot"] = plot
    if statistic is not None:
        data["report"]["statistic"] = statistic

    if seeds_csv:
        try:
            seeds = [int(s) for s in seeds_csv.split(",") if s.strip()]
        except ValueError as e:
            raise ConfigurationError(f"Niepoprawna lista seedów: {seeds_csv}") from e
        if seeds:
            data["seeds"] = seeds

    return parse_params(data)


def _summary_table(experiment: ExperimentResult, instance_name: str) -> Table:
    table = Table(title=f"Wyniki: {instance_name}")
    table.add_column("Run", justify="right")
    table.add_column("Seed", justify="right")
    table.add_column("Generacje", justify="right")
    table.add_column("Start best", justify="right")
    table.add_column("Koniec best", justify="right")
    table.add_column("Koniec avg", justify="right")
    table.add_column("Stop")
    for res in experiment.results:
        last = res.history[-1] if res.history else res.initial
        table.add_row(
            str(res.run_index + 1),
            str(res.seed),
            str(res.generations),
            f"{res.initial.best:.3f}" if res.initial else "-",
            f"{last.best:.3f}" if last else "-",
            f"{last.average:.3f}" if last else "-",
            res.stopped_reason,
        )
    return table


DEFAULT_INSTANCE = Path("data/instances/burma4.xml")
DEFAULT_OUT = Path("experiments/results/auto.jsonl")


@app.command("run-ga")
def run_ga(
    instance: Path = typer.Option(
        DEFAULT_INSTANCE, "--instance", "-i",
        help=f"Ścieżka do pliku *.json lub *.xml z instancją (domyślnie: {DEFAULT_INSTANCE})"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Plik konfiguracyjny JSON (np. experiments/configs/base.json); bez niego - wartości domyślne"
    ),
    out: Path = typer.Option(
        DEFAULT_OUT, "--out", "-o",
        help=f"Plik wynikowy *.jsonl (dopisywanie; domyślnie: {DEFAULT_OUT})"
    ),
    series_out: Optional[Path] = typer.Option(
        None, "--series-out", help="Plik JSON z zagregowanymi seriami (wejście dla wykresu)"
    ),

    # Nadpisania popularnych parametrów:
    pop: Optional[int] = typer.Option(None, help="population (>=10)"),
    tournament: Optional[int] = typer.Option(None, help="tournament (1..population)"),
    max_generations: Optional[int] = typer.Option(None, help="max_generations"),
    runs: Optional[int] = typer.Option(None, help="liczba niezależnych uruchomień"),
    workers: Optional[int] = typer.Option(None, help="liczba wątków dla runów"),

    # Operatory
    crossover: Optional[str] = typer.Option(None, help='crossover: "fix" lub "ordered"'),
    mutation: Optional[str] = typer.Option(None, help='mutation: "single" | "multiple" | "inversion"'),
    swaps: Optional[int] = typer.Option(None, help="liczba zamian dla mutacji multiple (>=2)"),
    replacement: Optional[str] = typer.Option(None, help='replacement: "worst" | "worst_if_better"'),

    # Raport
    plot: Optional[str] = typer.Option(None, help='report.plot: "average" | "display_all" | "best" | "worst" | "range"'),
    statistic: Optional[str] = typer.Option(None, help='report.statistic: "average" | "best" | "worst"'),

    # Seeds lista
    seeds_csv: Optional[str] = typer.Option(None, help='Nadpisz seeds: np. "0,1,2,3"'),

    time_limit: float = typer.Option(0.0, help="Limit czasu (s) dla całej serii; 0 = brak"),
    log_every: int = typer.Option(1000, help="Co ile generacji drukować postęp; 0 = wcale"),

    # Walidacja bez uruchamiania
    dry_run: bool = typer.Option(False, help="Tylko wczytaj i zweryfikuj config/instancję - nie uruchamiaj GA"),
):
    """Główna komenda: przygotuj parametry, wczytaj instancję i odpal eksperymenty."""
    try:
        # 1) Wczytaj config i zwaliduj
        params = parse_params(read_json(config)) if config is not None else Params()

        # 2) Zastosuj ewentualne nadpisania z CLI
        params = _merge_overrides(
            params, pop, tournament, crossover, mutation, swaps, replacement,
            max_generations, runs, workers, plot, statistic, seeds_csv,
        )

        # 3) Instancja -> CostModel
        inst, cost_model = load_cost_model(instance)
    except (ConfigurationError, InputDataError) as e:
        print(f"[red]Błąd:[/red] {e}")
        raise typer.Exit(code=2)

    print("[bold]Konfiguracja końcowa (parsowana i zwalidowana):[/bold]")
    print(params.model_dump(mode="json"))
    print(f"[green]Instancja:[/green] {inst.name} (n={cost_model.n_cities})")

    if dry_run:
        print("[yellow]Dry-run zakończony. Nie uruchamiam GA.[/yellow]")
        raise typer.Exit(code=0)

    # 4) Uruchomienie właściwego eksperymentu
    experiment = run_on_cost_model(
        inst, cost_model, params, out_path=out,
        time_limit_sec=time_limit, log_every=log_every, series_out=series_out,
    )

    console.print(_summary_table(experiment, inst.name))
    if experiment.results:
        for name, series in experiment.aggregate(params.report.plot, params.report.statistic).items():
            if series:
                print(f"Ostatni koszt ({params.report.statistic}) dla {inst.name} / {name}: {series[-1]:.3f}")

    if not experiment.ok:
        for failure in experiment.failures:
            print(f"[red]Run {failure.run_index + 1} nieudany w generacji {failure.generation}:[/red] {failure.cause}")
        raise typer.Exit(code=1)

    print(f"[bold green]Zakończono. Wyniki w:[/bold green] {out}")


@app.callback()
def main() -> None:
    """Steady-state GA dla problemu komiwojażera."""


if __name__ == "__main__":
    app()
