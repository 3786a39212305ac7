"""
Steady-state algorytm ewolucyjny dla problemu komiwojażera (TSP).

Moduły: `model` (config, Pydantic), `fitness` (CostModel), `chromosome`, `ga` (operatory),
`population`, `engine` (pętla steady-state), `runner` (wiele runów), `stats`, `io`, `cli`.
"""

__all__ = [
    "chromosome",
    "cli",
    "engine",
    "errors",
    "fitness",
    "ga",
    "io",
    "model",
    "population",
    "runner",
    "stats",
]
