import itertools
from concurrent.futures import ThreadPoolExecutor

import pytest

import huffman as huff
from huffman import (
    HuffmanDecoder,
    HuffmanNode,
    HuffmanQueue,
    InvalidInput,
    TruncatedOrCorruptStream,
    UnknownSymbol,
)
from frequency_tables import ENGLISH_FREQUENCIES, FRENCH_FREQUENCIES, LANGUAGES


CLASSIC = {"a": 5, "b": 9, "c": 12, "d": 13, "e": 16, "f": 45}


def codes_for(table):
    root = huff.build_huffman_tree(table)
    return root, huff.generate_huffman_codes(root)


# Priority queue

def test_queue_pops_in_frequency_order():
    q = HuffmanQueue(HuffmanNode(s, f) for s, f in [("c", 3), ("a", 1), ("b", 2)])
    assert len(q) == 3
    assert [q.pop_min().symbol for _ in range(3)] == ["a", "b", "c"]
    assert q.pop_min() is None


def test_queue_equal_weights_keep_insertion_order():
    q = HuffmanQueue()
    for s in "pqrs":
        q.push(HuffmanNode(s, 7))
    q.push(HuffmanNode("t", 6))
    assert [q.pop_min().symbol for _ in range(5)] == ["t", "p", "q", "r", "s"]


# Tree builder

def test_classic_tree_shape_and_weight():
    root, codes = codes_for(CLASSIC)
    assert root.frequency == 100
    assert codes == {
        "f": "0",
        "c": "100",
        "d": "101",
        "a": "1100",
        "b": "1101",
        "e": "111",
    }
    assert min(codes.values(), key=len) == codes["f"]


def test_first_extracted_becomes_left_child_on_ties():
    # the merged (a, b) node has weight 2 like c, but was pushed after c
    _, codes = codes_for([("a", 1), ("b", 1), ("c", 2)])
    assert codes == {"c": "0", "a": "10", "b": "11"}


def test_node_counts():
    root = huff.build_huffman_tree(ENGLISH_FREQUENCIES)
    assert huff.count_nodes(root) == (52, 51)
    assert root.frequency == sum(ENGLISH_FREQUENCIES.values())


def test_accepts_pairs_and_parallel_arrays():
    pairs = huff.zip_frequency_table("abcdef", [5, 9, 12, 13, 16, 45])
    _, from_pairs = codes_for(pairs)
    _, from_mapping = codes_for(CLASSIC)
    assert from_pairs == from_mapping


def test_parallel_arrays_length_mismatch():
    with pytest.raises(InvalidInput):
        huff.zip_frequency_table("abc", [1, 2])


@pytest.mark.parametrize("table", [{}, []])
def test_empty_table_is_invalid(table):
    with pytest.raises(InvalidInput):
        huff.build_huffman_tree(table)


@pytest.mark.parametrize("table", [
    [("a", -1), ("b", 2)],
    [("a", 1.5)],
    [("ab", 1)],
    [(None, 1)],
    [("a", 1), ("a", 2)],
])
def test_malformed_tables_are_invalid(table):
    with pytest.raises(InvalidInput):
        huff.build_huffman_tree(table)


def test_zero_frequencies_are_allowed():
    root, codes = codes_for({"a": 0, "b": 0, "c": 1})
    assert root.frequency == 1
    assert set(codes) == {"a", "b", "c"}


# Code table

def test_single_symbol_gets_code_zero():
    root, codes = codes_for({"z": 7})
    assert root.is_leaf
    assert codes == {"z": "0"}
    encoded = huff.huffman_encode("zzz", codes)
    assert encoded == "0 0 0 "
    assert huff.huffman_decode(encoded, root) == "zzz"


def test_single_symbol_tree_rejects_one_bit():
    root, _ = codes_for({"z": 7})
    with pytest.raises(TruncatedOrCorruptStream):
        huff.huffman_decode("1 ", root)


@pytest.mark.parametrize("table", [CLASSIC, ENGLISH_FREQUENCIES, FRENCH_FREQUENCIES])
def test_codes_are_prefix_free(table):
    _, codes = codes_for(table)
    for (s1, c1), (s2, c2) in itertools.permutations(codes.items(), 2):
        assert not c2.startswith(c1), f"{s1}={c1} is a prefix of {s2}={c2}"


@pytest.mark.parametrize("table", [ENGLISH_FREQUENCIES, FRENCH_FREQUENCIES])
def test_rarer_symbols_never_get_shorter_codes(table):
    _, codes = codes_for(table)
    for s, t in itertools.permutations(table, 2):
        if table[s] < table[t]:
            assert len(codes[s]) >= len(codes[t])


def test_construction_is_deterministic():
    for table in LANGUAGES.values():
        assert codes_for(table)[1] == codes_for(dict(table))[1]


def test_languages_build_independently_on_threads():
    expected = {name: codes_for(table)[1] for name, table in LANGUAGES.items()}
    with ThreadPoolExecutor(max_workers=2) as pool:
        results = dict(zip(LANGUAGES, pool.map(lambda t: codes_for(t)[1], LANGUAGES.values())))
    assert results == expected


def test_format_code_table_sorted_by_character():
    _, codes = codes_for({"b": 1, "A": 1, "a": 2})
    lines = huff.format_code_table(codes)
    assert [line.split(":")[0] for line in lines] == ["A", "a", "b"]
    assert lines[1] == f"a: {codes['a']}"


def test_average_code_length():
    _, codes = codes_for(CLASSIC)
    assert huff.average_code_length(codes, CLASSIC) == pytest.approx(2.24)


# Encode / decode

def test_classic_encode_decode():
    root, codes = codes_for(CLASSIC)
    encoded = huff.huffman_encode("aaabbc", codes)
    assert encoded == "1100 1100 1100 1101 1101 100 "
    assert huff.huffman_decode(encoded, root) == "aaabbc"


def test_encode_empty_text():
    root, codes = codes_for(CLASSIC)
    assert huff.huffman_encode("", codes) == ""
    assert huff.huffman_decode("", root) == ""


@pytest.mark.parametrize("text", [
    "Hello",
    "TheQuickBrownFoxJumpsOverTheLazyDog",
    "LeCoeurALeSesRaisonsQueLaRaisonNeConnaitPoint",
    "x" * 50,
])
@pytest.mark.parametrize("table", [ENGLISH_FREQUENCIES, FRENCH_FREQUENCIES])
def test_round_trip_letters(table, text):
    root, codes = codes_for(table)
    assert huff.huffman_decode(huff.huffman_encode(text, codes), root) == text


def test_unknown_symbol_is_reported():
    _, codes = codes_for(ENGLISH_FREQUENCIES)
    with pytest.raises(UnknownSymbol) as excinfo:
        huff.huffman_encode("ab c", codes)
    assert excinfo.value.symbol == " "
    assert excinfo.value.position == 2
    assert isinstance(excinfo.value, KeyError)
    assert "position 2" in str(excinfo.value)


def test_leaf_at_delimiter_emits_once():
    root, _ = codes_for(CLASSIC)
    assert huff.huffman_decode("0 0 ", root) == "ff"


def test_leaf_reached_without_delimiter_still_emits():
    root, _ = codes_for(CLASSIC)
    assert huff.huffman_decode("01100111", root) == "fae"


def test_delimiter_inside_a_code_is_skipped():
    root, _ = codes_for(CLASSIC)
    assert huff.huffman_decode("11 00 ", root) == "a"


def test_truncated_stream():
    root, _ = codes_for(CLASSIC)
    with pytest.raises(TruncatedOrCorruptStream) as excinfo:
        huff.huffman_decode("0 110", root)
    assert excinfo.value.offset == 5


def test_unexpected_character_is_corrupt():
    root, _ = codes_for(CLASSIC)
    with pytest.raises(TruncatedOrCorruptStream):
        huff.huffman_decode("0 2 ", root)


def test_missing_child_is_corrupt():
    root = HuffmanNode(None, 3, HuffmanNode("a", 3), None)
    assert huff.huffman_decode("0", root) == "a"
    with pytest.raises(TruncatedOrCorruptStream):
        huff.huffman_decode("1", root)


def test_custom_delimiter():
    root, codes = codes_for(CLASSIC)
    encoded = huff.huffman_encode("fed", codes, delimiter="|")
    assert encoded == "0|111|101|"
    assert huff.huffman_decode(encoded, root, delimiter="|") == "fed"


def test_chunked_decoder_carries_cursor():
    root, _ = codes_for(CLASSIC)
    decoder = HuffmanDecoder(root)
    assert decoder.feed("110") == ""
    assert decoder.feed("0 0") == "af"
    decoder.close()


def test_chunked_decoder_close_detects_truncation():
    root, _ = codes_for(CLASSIC)
    decoder = HuffmanDecoder(root)
    decoder.feed("0 11")
    with pytest.raises(TruncatedOrCorruptStream):
        decoder.close()


def test_decoder_needs_a_tree():
    with pytest.raises(InvalidInput):
        HuffmanDecoder(None)


def test_iter_encoded_tokens():
    _, codes = codes_for(CLASSIC)
    assert list(huff.iter_encoded_tokens("fab", codes)) == ["0", "1100", "1101"]


@pytest.mark.parametrize("delimiter", ["0", "1", "", ", ", 7])
def test_delimiter_must_be_one_non_bit_character(delimiter):
    root, codes = codes_for(CLASSIC)
    with pytest.raises(InvalidInput):
        huff.huffman_encode("fedcba", codes, delimiter=delimiter)
    with pytest.raises(InvalidInput):
        huff.huffman_decode("0 ", root, delimiter=delimiter)


@pytest.mark.parametrize("delimiter", [" ", ",", "\n"])
def test_round_trip_with_other_delimiters(delimiter):
    root, codes = codes_for(CLASSIC)
    encoded = huff.huffman_encode("fedcba", codes, delimiter=delimiter)
    assert huff.huffman_decode(encoded, root, delimiter=delimiter) == "fedcba"


@pytest.mark.parametrize("table", [None, [5], 42])
def test_non_iterable_tables_are_invalid(table):
    with pytest.raises(InvalidInput):
        huff.build_huffman_tree(table)
