"""
Command line front end for the letter Huffman coder.

How to run:
  python main.py codes                       # English and French code tables
  python main.py codes --language french
  python main.py encode input.txt --letters-only -o encoded.txt
  python main.py decode encoded.txt --language english
  python main.py roundtrip input.txt --table my_table.csv --letters-only
  python main.py demo --letters-only           # reads english_input.txt and french_input.txt
  python main.py demo --english my_text.txt --french ""
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import huffman as huff
from frequency_tables import LANGUAGES, get_language_table, load_frequency_table, read_text_file


DEFAULT_LANGUAGE = "english"


class LanguageCoder:
    """Tree and code table built for one frequency table. Nothing is shared between coders."""

    def __init__(self, name: str, frequency_table: Dict[str, int]):
        self.name = name
        self.frequency_table = frequency_table
        self.root = huff.build_huffman_tree(frequency_table)
        self.code_map = huff.generate_huffman_codes(self.root)

    def keep_known(self, text: str) -> Tuple[str, int]:
        """Drop characters the table cannot encode; returns (kept text, dropped count)."""
        kept = [ch for ch in text if ch in self.code_map]
        return ''.join(kept), len(text) - len(kept)

    def encode(self, text: str) -> str:
        return huff.huffman_encode(text, self.code_map)

    def decode(self, encoded: str) -> str:
        return huff.huffman_decode(encoded, self.root)


def coder_from_args(args: argparse.Namespace) -> LanguageCoder:
    if getattr(args, "table", None):
        return LanguageCoder(Path(args.table).stem, load_frequency_table(args.table))
    language = args.language or DEFAULT_LANGUAGE
    return LanguageCoder(language, get_language_table(language))


def print_codes(coder: LanguageCoder) -> None:
    print(f"{coder.name.capitalize()} Huffman Codes:")
    for line in huff.format_code_table(coder.code_map):
        print(line)


def prepare_text(coder: LanguageCoder, text: str, letters_only: bool) -> str:
    if not letters_only:
        return text
    kept, dropped = coder.keep_known(text)
    if dropped:
        print(f"Dropped {dropped} character(s) not in the {coder.name} table", file=sys.stderr)
    return kept


def write_or_print(text: str, output: Optional[str]) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        print(f"Wrote {len(text)} characters to {output}")
    else:
        print(text)


# Subcommands

def cmd_codes(args: argparse.Namespace) -> int:
    if args.table or args.language:
        print_codes(coder_from_args(args))
        return 0

    for i, name in enumerate(LANGUAGES):
        if i:
            print()
        print_codes(LanguageCoder(name, get_language_table(name)))
    return 0


def cmd_encode(args: argparse.Namespace) -> int:
    coder = coder_from_args(args)
    text = prepare_text(coder, read_text_file(args.input), args.letters_only)
    write_or_print(coder.encode(text), args.output)
    return 0


def cmd_decode(args: argparse.Namespace) -> int:
    coder = coder_from_args(args)
    encoded = read_text_file(args.input).rstrip("\r\n")
    write_or_print(coder.decode(encoded), args.output)
    return 0


def roundtrip(coder: LanguageCoder, text: str) -> Tuple[str, str]:
    encoded = coder.encode(text)
    decoded = coder.decode(encoded)
    label = coder.name.capitalize()
    print(f"\nEncoded {label} Text:\n{encoded}")
    print(f"\nDecoded {label} Text:\n{decoded}")
    return encoded, decoded


def cmd_roundtrip(args: argparse.Namespace) -> int:
    coder = coder_from_args(args)
    text = prepare_text(coder, read_text_file(args.input), args.letters_only)
    _, decoded = roundtrip(coder, text)
    if decoded != text:
        print("Error: decoded text does not match the input", file=sys.stderr)
        return 1
    return 0


def cmd_demo(args: argparse.Namespace) -> int:
    coders = [LanguageCoder(name, get_language_table(name)) for name in LANGUAGES]

    for i, coder in enumerate(coders):
        if i:
            print()
        print_codes(coder)

    inputs = {"english": args.english, "french": args.french}
    status = 0
    for coder in coders:
        path = inputs.get(coder.name)
        if not path:
            continue
        text = prepare_text(coder, read_text_file(path), args.letters_only)
        _, decoded = roundtrip(coder, text)
        if decoded != text:
            print(f"Error: {coder.name} round trip does not match the input", file=sys.stderr)
            status = 1
    return status


# Main

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Huffman coding of text with per-language letter frequencies")
    sub = ap.add_subparsers(dest="command", required=True)

    def add_table_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--language", choices=sorted(LANGUAGES), default=None,
                       help=f"Built-in letter frequency table (default: {DEFAULT_LANGUAGE})")
        p.add_argument("--table", type=str, default=None,
                       help="CSV file with symbol,frequency rows; overrides --language")

    p = sub.add_parser("codes", help="Print the code table")
    add_table_args(p)
    p.set_defaults(func=cmd_codes)

    p = sub.add_parser("encode", help="Encode a text file")
    add_table_args(p)
    p.add_argument("input", help="Text file to encode")
    p.add_argument("-o", "--output", default=None, help="Write the result here instead of stdout")
    p.add_argument("--letters-only", action="store_true", help="Drop characters missing from the table")
    p.set_defaults(func=cmd_encode)

    p = sub.add_parser("decode", help="Decode a file of space separated codes")
    add_table_args(p)
    p.add_argument("input", help="Encoded file to decode")
    p.add_argument("-o", "--output", default=None, help="Write the result here instead of stdout")
    p.set_defaults(func=cmd_decode)

    p = sub.add_parser("roundtrip", help="Encode then decode a text file and check the result")
    add_table_args(p)
    p.add_argument("input", help="Text file to encode")
    p.add_argument("--letters-only", action="store_true", help="Drop characters missing from the table")
    p.set_defaults(func=cmd_roundtrip)

    p = sub.add_parser("demo", help="Print both code tables and round trip one file per language")
    p.add_argument("--english", default="english_input.txt",
                   help="English input text file (default: %(default)s; pass \"\" to skip)")
    p.add_argument("--french", default="french_input.txt",
                   help="French input text file (default: %(default)s; pass \"\" to skip)")
    p.add_argument("--letters-only", action="store_true", help="Drop characters missing from the table")
    p.set_defaults(func=cmd_demo)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except (huff.HuffmanError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
