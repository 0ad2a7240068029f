"""
IUPAC nucleotide ambiguity codes.

Each code stands for a subset of the four bases. The subset is encoded as a
flag byte in which one of the four least significant bits is set per base
(T=1, C=2, A=4, G=8). Two codes can represent the same base if the bitwise
AND of their flags is non-zero.

Every code also has a dense index (0..14) that is used to address rows and
columns of the scoring matrix. All other characters map to UNDEFINED_INDEX.
"""
from typing import Dict

# Bit order of the flag representation
_FLAG_BASES = "TCAG"

# Ordered: the position of a code in this mapping is its dense index
IUPAC_CODES: Dict[str, str] = {
    "A": "A",
    "B": "CGT",
    "C": "C",
    "D": "AGT",
    "G": "G",
    "H": "ACT",
    "K": "GT",
    "M": "AC",
    "N": "ACGT",
    "R": "AG",
    "S": "CG",
    "T": "T",
    "V": "ACG",
    "W": "AT",
    "Y": "CT",
}

UNDEFINED_INDEX = 15
INDEX_COUNT = UNDEFINED_INDEX + 1


def _flags(bases: str) -> int:
    flags = 0
    for base in bases:
        flags |= 1 << _FLAG_BASES.index(base)
    return flags


def _base_flags_table() -> bytes:
    """
    Provide a translation table that maps IUPAC characters to their base flags.

    Lowercase versions are also translated and U is treated the same as T.
    All other characters are mapped to 0.
    """
    t = bytearray(256)
    for code, bases in IUPAC_CODES.items():
        flags = _flags(bases)
        t[ord(code)] = flags
        t[ord(code.lower())] = flags
    t[ord("U")] = t[ord("u")] = t[ord("T")]
    return bytes(t)


def _index_table() -> bytes:
    """
    Provide a translation table that maps IUPAC characters to their dense index.

    Characters that are not IUPAC nucleotide codes are mapped to UNDEFINED_INDEX.
    """
    t = bytearray([UNDEFINED_INDEX]) * 256
    for i, code in enumerate(IUPAC_CODES):
        t[ord(code)] = i
        t[ord(code.lower())] = i
    t[ord("U")] = t[ord("u")] = t[ord("T")]
    return bytes(t)


def _complement_table() -> Dict[int, str]:
    #         ABCDEFGHIJKLMNOPQRSTUVWXYZ
    target = "TVGHEFCDIJMLKNOPQYSAABWXRZ"
    source = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    return str.maketrans(source + source.lower(), target + target.lower())


BASE_FLAGS = _base_flags_table()
IUPAC_INDEX = _index_table()
_COMPLEMENT = _complement_table()


def _encode(sequence: str) -> bytes:
    # Characters outside of Latin-1 become "?", which is undefined
    return sequence.encode("latin-1", errors="replace")


def base_flags(base: str) -> int:
    return _encode(base).translate(BASE_FLAGS)[0]


def iupac_index(base: str) -> int:
    """Return the dense index (0..15) of a single character"""
    return _encode(base).translate(IUPAC_INDEX)[0]


def iupac_indices(sequence: str) -> bytes:
    """Return the dense index of every character of sequence as a bytes object"""
    return _encode(sequence).translate(IUPAC_INDEX)


def complement(sequence: str) -> str:
    """
    Complement every IUPAC character of sequence. Case is retained and
    characters that are not letters are left unchanged.
    """
    return sequence.translate(_COMPLEMENT)


def reverse_complement(sequence: str) -> str:
    return complement(sequence)[::-1]


def base_match(base: str, query: str) -> bool:
    """
    Return whether query covers base, that is, whether every nucleotide
    that base may stand for is also allowed by query.
    """
    flags = base_flags(base)
    return flags & base_flags(query) == flags


def is_redundant(base: str) -> bool:
    """Return whether base stands for more than one nucleotide"""
    flags = base_flags(base)
    return flags & (flags - 1) != 0
