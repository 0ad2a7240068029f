import pytest

from tracealign.iupac import (
    IUPAC_CODES,
    UNDEFINED_INDEX,
    base_flags,
    base_match,
    complement,
    is_redundant,
    iupac_index,
    iupac_indices,
    reverse_complement,
)


def test_dense_indices():
    assert [iupac_index(code) for code in IUPAC_CODES] == list(range(15))
    assert [iupac_index(code.lower()) for code in IUPAC_CODES] == list(range(15))


@pytest.mark.parametrize("char", ["X", "x", "-", "*", " ", "\0", "é", "€"])
def test_undefined_index(char):
    assert iupac_index(char) == UNDEFINED_INDEX


def test_u_is_t():
    assert iupac_index("U") == iupac_index("T") == iupac_index("u")
    assert base_flags("U") == base_flags("T")


def test_iupac_indices():
    assert iupac_indices("AcgtX") == bytes([0, 2, 4, 11, UNDEFINED_INDEX])
    assert iupac_indices("") == b""


def test_flags_are_unions_of_bases():
    for code, bases in IUPAC_CODES.items():
        flags = 0
        for base in bases:
            flags |= base_flags(base)
        assert base_flags(code) == flags
        assert bin(flags).count("1") == len(bases)
    assert base_flags("X") == 0


def test_complement():
    assert complement("ACGTRYKMBDHVNSW") == "TGCAYRMKVHDBNSW"
    assert complement("acgtn") == "tgcan"
    assert complement("A-C*") == "T-G*"


def test_reverse_complement():
    assert reverse_complement("AACGTTTG") == "CAAACGTT"
    assert reverse_complement("") == ""


@pytest.mark.parametrize(
    "base,query,expected",
    [
        ("A", "A", True),
        ("a", "A", True),
        ("A", "C", False),
        ("A", "R", True),
        ("R", "A", False),
        ("R", "N", True),
        ("N", "R", False),
        ("Y", "B", True),
        ("U", "T", True),
    ],
)
def test_base_match(base, query, expected):
    assert base_match(base, query) is expected


def test_is_redundant():
    assert is_redundant("N")
    assert is_redundant("r")
    assert not is_redundant("A")
    assert not is_redundant("u")
    assert not is_redundant("X")
