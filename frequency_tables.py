"""
Letter frequency tables and the file helpers that feed them.

Frequencies are percentages scaled by 100 so they stay integers. Upper case
letters reuse the lower case figures. Table order is a..z then A..Z, and that
order decides ties when the tree is built.
"""

import csv
import string
from pathlib import Path
from typing import Dict, Union

from huffman import InvalidInput


_ENGLISH_LOWER = [
    834, 154, 273, 414, 1260, 203, 192, 611, 671, 23,
    87, 424, 253, 680, 770, 166, 9, 568, 611, 937,
    285, 106, 234, 20, 204, 6,
]

_FRENCH_LOWER = [
    813, 93, 315, 355, 1510, 96, 97, 108, 694, 71,
    16, 568, 323, 642, 527, 303, 89, 643, 791, 711,
    605, 183, 4, 42, 19, 106,
]


def _letter_table(lower_freqs) -> Dict[str, int]:
    table = dict(zip(string.ascii_lowercase, lower_freqs))
    table.update(zip(string.ascii_uppercase, lower_freqs))
    return table


ENGLISH_FREQUENCIES = _letter_table(_ENGLISH_LOWER)
FRENCH_FREQUENCIES = _letter_table(_FRENCH_LOWER)

LANGUAGES = {
    "english": ENGLISH_FREQUENCIES,
    "french": FRENCH_FREQUENCIES,
}


def get_language_table(name: str) -> Dict[str, int]:
    try:
        return dict(LANGUAGES[name.lower()])
    except KeyError:
        raise InvalidInput(
            f"unknown language {name!r} (choose from {', '.join(sorted(LANGUAGES))})"
        ) from None


def load_frequency_table(path: Union[str, Path]) -> Dict[str, int]:
    """
    Read a `symbol,frequency` CSV file into an ordered table.

    Row order is kept. Bad rows raise InvalidInput naming the file and line;
    a missing file raises OSError from open().
    """
    path = Path(path)
    table: Dict[str, int] = {}
    # utf-8-sig drops the BOM spreadsheet exports put in front of the header
    with path.open("r", newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None or not {"symbol", "frequency"} <= set(reader.fieldnames):
            raise InvalidInput(f"{path}: expected a 'symbol,frequency' header")
        for row in reader:
            line = reader.line_num
            symbol = row["symbol"]
            try:
                frequency = int(row["frequency"])
            except (TypeError, ValueError):
                raise InvalidInput(
                    f"{path}:{line}: frequency {row['frequency']!r} is not an integer"
                ) from None
            if symbol is None or len(symbol) != 1:
                raise InvalidInput(f"{path}:{line}: symbol must be one character, got {symbol!r}")
            if symbol in table:
                raise InvalidInput(f"{path}:{line}: duplicate symbol {symbol!r}")
            if frequency < 0:
                raise InvalidInput(f"{path}:{line}: negative frequency {frequency}")
            table[symbol] = frequency

    if not table:
        raise InvalidInput(f"{path}: no frequency rows")
    return table


def write_frequency_table(path: Union[str, Path], table: Dict[str, int]) -> None:
    path = Path(path)
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["symbol", "frequency"])
        for symbol, frequency in table.items():
            w.writerow([symbol, frequency])


def read_text_file(path: Union[str, Path], encoding: str = "utf-8") -> str:
    # OSError from open() already names the file
    with Path(path).open("r", encoding=encoding) as f:
        return f.read()
