#!/usr/bin/env python3
"""Trace RSS et débit en fonction de la coordonnée de balayage.

Lit les fichiers ``output_<modèle>.csv`` (balayage en distance) et
``output_runtime.csv`` (balayage en durée), affiche un résumé par modèle et
enregistre les figures dans ``--figures-dir``.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Mapping

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from linksweep.launcher.config import DEFAULT_OUTPUT_DIR

FIGSIZE = (7.5, 6.0)
SUMMARY_COLUMNS = ["model", "runs", "max_connected_m", "rss_at_max_dbm", "peak_throughput_kbps"]


def load_sweep_csv(path: Path) -> pd.DataFrame:
    """Charge un CSV de balayage en ignorant la colonne vide finale.

    The first column is renamed ``coordinate`` and the model name stored in
    the fourth header cell of a distance sweep is kept in ``df.attrs``.
    """

    # Rows end with a delimiter, index_col=False keeps the first column as data.
    df = pd.read_csv(path, index_col=False)
    label = None
    if len(df.columns) > 3:
        label = str(df.columns[3])
        df = df.iloc[:, :3]
    coordinate_name = str(df.columns[0])
    df = df.rename(columns={coordinate_name: "coordinate"})
    df.attrs["model"] = label
    df.attrs["coordinate_name"] = coordinate_name
    return df


def load_distance_sweeps(results_dir: Path) -> dict[str, pd.DataFrame]:
    sweeps: dict[str, pd.DataFrame] = {}
    for path in sorted(results_dir.glob("output_*.csv")):
        if path.name == "output_runtime.csv":
            continue
        df = load_sweep_csv(path)
        name = df.attrs.get("model") or path.stem.removeprefix("output_")
        sweeps[name] = df
    return sweeps


def summarize_distance_sweeps(sweeps: Mapping[str, pd.DataFrame]) -> pd.DataFrame:
    rows = []
    for name, df in sweeps.items():
        connected = df[df["throughputKbps"] > 0]
        if connected.empty:
            max_connected = None
            rss_at_max = None
        else:
            last = connected.loc[connected["coordinate"].idxmax()]
            max_connected = float(last["coordinate"])
            rss_at_max = float(last["rssDBm"])
        rows.append(
            {
                "model": name,
                "runs": int(len(df)),
                "max_connected_m": max_connected,
                "rss_at_max_dbm": rss_at_max,
                "peak_throughput_kbps": float(df["throughputKbps"].max()) if len(df) else 0.0,
            }
        )
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def plot_sweeps(sweeps: Mapping[str, pd.DataFrame], xlabel: str, output_base: Path) -> list[Path]:
    fig, (ax_rss, ax_thr) = plt.subplots(2, 1, sharex=True, figsize=FIGSIZE)
    for name, df in sweeps.items():
        ax_rss.plot(df["coordinate"], df["rssDBm"], label=name)
        ax_thr.plot(df["coordinate"], df["throughputKbps"], label=name)
    ax_rss.set_ylabel("RSS (dBm)")
    ax_thr.set_ylabel("Throughput (Kbps)")
    ax_thr.set_xlabel(xlabel)
    ax_rss.grid(True)
    ax_thr.grid(True)
    ax_rss.legend(frameon=False)
    fig.tight_layout()

    output_base.parent.mkdir(parents=True, exist_ok=True)
    saved = []
    for ext in ("png", "pdf"):
        path = output_base.with_suffix(f".{ext}")
        fig.savefig(path, dpi=300, bbox_inches="tight")
        saved.append(path)
    plt.close(fig)
    return saved


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--results-dir", type=Path, default=DEFAULT_OUTPUT_DIR, help="Répertoire des CSV")
    parser.add_argument("--figures-dir", type=Path, default=Path("figures"), help="Répertoire des figures")
    args = parser.parse_args(argv)

    sweeps = load_distance_sweeps(args.results_dir)
    if sweeps:
        print(summarize_distance_sweeps(sweeps).to_string(index=False))
        for path in plot_sweeps(sweeps, "Distance (m)", args.figures_dir / "rss_throughput_vs_distance"):
            print(f"Saved {path}")

    runtime_csv = args.results_dir / "output_runtime.csv"
    if runtime_csv.exists():
        runtime = {"runtime": load_sweep_csv(runtime_csv)}
        for path in plot_sweeps(runtime, "Runtime (s)", args.figures_dir / "rss_throughput_vs_runtime"):
            print(f"Saved {path}")

    if not sweeps and not runtime_csv.exists():
        print(f"Aucun résultat trouvé dans {args.results_dir}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
