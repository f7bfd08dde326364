"""
Experiment: English vs French letter codes

Builds a Huffman code from each language's letter table, then encodes and
decodes synthetic letter streams with both codes to compare how many bits
each code spends per letter on each kind of text.

Outputs (in --outdir):
  - metrics.csv     (raw row per run per language)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --size 20000 --generators uniform,english_text
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import string
import time
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import matplotlib.pyplot as plt

import huffman as huff
from frequency_tables import LANGUAGES, get_language_table


# Synthetic text generators

LETTERS = string.ascii_lowercase + string.ascii_uppercase

def gen_uniform(size: int, seed: int = 0) -> str:
    rng = random.Random(seed)
    return ''.join(rng.choice(LETTERS) for _ in range(size))

def gen_weighted(size: int, table: Dict[str, int], seed: int = 0) -> str:
    rng = random.Random(seed)
    symbols = list(table.keys())
    weights = [table[s] for s in symbols]
    return ''.join(rng.choices(symbols, weights=weights, k=size))

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], str]] = {
    "uniform": lambda size, seed: gen_uniform(size, seed=seed),
    "english_text": lambda size, seed: gen_weighted(size, get_language_table("english"), seed=seed),
    "french_text": lambda size, seed: gen_weighted(size, get_language_table("french"), seed=seed),
}

def generate_dataset(name: str, size: int, seed: int) -> str:
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        raise ValueError(f"unknown generator {name!r} (choose from {', '.join(GENERATOR_REGISTRY)})")
    return fn(size, seed)


# Experiment runner

@dataclass
class MetricRow:
    dataset_name: str
    run_id: int
    language: str
    unique_symbols: int

    build_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    input_chars: int
    encoded_chars: int  # bits plus delimiters
    bits_total: int
    bits_per_symbol: float
    average_code_length: float  # weighted by the language table itself
    correctness_ok: int  # 1 or 0


def run_one(text: str, language: str, table: Dict[str, int]) -> MetricRow:
    t0 = time.perf_counter()
    root = huff.build_huffman_tree(table)
    code_map = huff.generate_huffman_codes(root)
    t1 = time.perf_counter()

    encoded = huff.huffman_encode(text, code_map)
    t2 = time.perf_counter()

    decoded = huff.huffman_decode(encoded, root)
    t3 = time.perf_counter()

    bits_total = len(encoded) - len(text) # one delimiter per input character

    return MetricRow(
        dataset_name="",
        run_id=0,
        language=language,
        unique_symbols=len(code_map),
        build_ms=(t1 - t0) * 1000.0,
        encode_ms=(t2 - t1) * 1000.0,
        decode_ms=(t3 - t2) * 1000.0,
        total_ms=(t3 - t0) * 1000.0,
        input_chars=len(text),
        encoded_chars=len(encoded),
        bits_total=bits_total,
        bits_per_symbol=bits_total / max(1, len(text)),
        average_code_length=huff.average_code_length(code_map, table),
        correctness_ok=1 if decoded == text else 0,
    )


def write_metrics(path: Path, rows: List[MetricRow]) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=[fld.name for fld in fields(MetricRow)])
        w.writeheader()
        w.writerows(asdict(r) for r in rows)


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)


def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by dataset_name, language and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str], List[MetricRow]] = {}
    for r in rows:
        key_to.setdefault((r.dataset_name, r.language), []).append(r)

    summary_fields = [
        "dataset_name", "language", "n_runs",
        "bits_per_symbol_mean", "bits_per_symbol_stdev",
        "encode_ms_mean", "encode_ms_stdev",
        "decode_ms_mean", "decode_ms_stdev",
        "build_ms_mean", "build_ms_stdev",
        "total_ms_mean", "total_ms_stdev",
        "correctness_ok_rate",
    ]

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for (dataset_name, language), items in sorted(key_to.items()):
            bp_m, bp_s = mean_stdev([x.bits_per_symbol for x in items])
            en_m, en_s = mean_stdev([x.encode_ms for x in items])
            de_m, de_s = mean_stdev([x.decode_ms for x in items])
            bu_m, bu_s = mean_stdev([x.build_ms for x in items])
            tt_m, tt_s = mean_stdev([x.total_ms for x in items])
            ok_rate = sum(x.correctness_ok for x in items) / len(items)

            w.writerow({
                "dataset_name": dataset_name,
                "language": language,
                "n_runs": len(items),
                "bits_per_symbol_mean": bp_m,
                "bits_per_symbol_stdev": bp_s,
                "encode_ms_mean": en_m,
                "encode_ms_stdev": en_s,
                "decode_ms_mean": de_m,
                "decode_ms_stdev": de_s,
                "build_ms_mean": bu_m,
                "build_ms_stdev": bu_s,
                "total_ms_mean": tt_m,
                "total_ms_stdev": tt_s,
                "correctness_ok_rate": ok_rate,
            })


# Plotting

def plot_code_lengths(outdir: Path, languages: Optional[List[str]] = None) -> Path:
    languages = languages or list(LANGUAGES)
    letters = list(string.ascii_lowercase)
    x = list(range(len(letters)))

    plt.figure(figsize=(10, 4))
    for lang in languages:
        code_map = huff.generate_huffman_codes(huff.build_huffman_tree(get_language_table(lang)))
        plt.plot(x, [len(code_map[ch]) for ch in letters], marker="o", label=lang)
    plt.xticks(x, letters)
    plt.ylabel("Code Length (bits)")
    plt.title("Code Length per Letter")
    plt.legend()
    plt.tight_layout()
    out = outdir / "code_lengths.png"
    plt.savefig(out, dpi=200)
    plt.close()
    return out


def plot_bits_per_symbol(rows: List[MetricRow], outdir: Path) -> Optional[Path]:
    if not rows:
        return None

    datasets = sorted(set(r.dataset_name for r in rows))
    languages = sorted(set(r.language for r in rows))

    def mean_for(dataset: str, language: str) -> float:
        vals = [r.bits_per_symbol for r in rows if r.dataset_name == dataset and r.language == language]
        return statistics.mean(vals) if vals else float("nan")

    x = list(range(len(datasets)))
    width = 0.8 / max(1, len(languages))

    plt.figure()
    for i, lang in enumerate(languages):
        y = [mean_for(d, lang) for d in datasets]
        plt.bar([xi + i * width for xi in x], y, width=width, label=lang)
    plt.xticks([xi + width * (len(languages) - 1) / 2 for xi in x], datasets, rotation=20, ha="right")
    plt.ylabel("Bits per Symbol")
    plt.title("Bits per Symbol by Dataset and Code")
    plt.legend()
    plt.tight_layout()
    out = outdir / "bits_per_symbol.png"
    plt.savefig(out, dpi=200)
    plt.close()
    return out


# Main

def run_experiments(generators: List[str], size: int, runs: int, seed: int) -> List[MetricRow]:
    tables = {name: get_language_table(name) for name in LANGUAGES}
    rows: List[MetricRow] = []
    for gen_name in generators:
        for run_id in range(1, runs + 1):
            text = generate_dataset(gen_name, size, seed + run_id)
            for language, table in tables.items():
                row = run_one(text, language, table)
                row.dataset_name = gen_name
                row.run_id = run_id
                rows.append(row)
    return rows

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--size", type=int, default=100_000, help="Letters per generated text")
    ap.add_argument("--generators", type=str, default="uniform,english_text,french_text",
                    help="Comma-separated dataset generator names")
    args = ap.parse_args(argv)

    generators = [g.strip() for g in args.generators.split(",") if g.strip()]
    unknown = [g for g in generators if g not in GENERATOR_REGISTRY]
    if unknown:
        ap.error(f"unknown generator(s): {', '.join(unknown)}")

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    rows = run_experiments(generators, max(1, args.size), max(1, args.runs), args.seed)

    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_metrics(metrics_csv, rows)
    group_summary(rows, summary_csv)

    plot_code_lengths(outdir)
    plot_bits_per_symbol(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    print("Charts saved in:", outdir.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
