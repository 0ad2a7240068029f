"""
Read-only view of a nucleotide read with per-base qualities

This is what the search functions in tracealign.align operate on.
"""
from typing import NamedTuple, Optional, Sequence, List

from dnaio import SequenceRecord

from .iupac import base_match, is_redundant, reverse_complement

# Used for bases for which no quality (or a quality of 0 or 1) was recorded
DEFAULT_BASE_QUALITY = 40


class BaseCounts(NamedTuple):
    a: int
    c: int
    g: int
    t: int
    other: int


class Read:
    """
    A nucleotide sequence together with one integer quality value per base.

    If fewer qualities than bases are given, the missing ones are set to 0
    (that is, "no quality recorded"). Surplus qualities are dropped.
    """

    __slots__ = ("name", "sequence", "qualities")

    def __init__(
        self,
        sequence: str,
        qualities: Optional[Sequence[int]] = None,
        name: str = "",
    ):
        self.name = name
        self.sequence = sequence
        quals: List[int] = list(qualities) if qualities is not None else []
        if len(quals) < len(sequence):
            quals.extend([0] * (len(sequence) - len(quals)))
        self.qualities = quals[: len(sequence)]

    @classmethod
    def from_record(cls, record: SequenceRecord, base: int = 33) -> "Read":
        """
        Create a Read from a dnaio SequenceRecord. Qualities are assumed to be
        ASCII-encoded as chr(qual + base). Records without qualities (FASTA)
        get default qualities.
        """
        if record.qualities is None:
            qualities = None
        else:
            qualities = [q - base for q in record.qualities_as_bytes()]
        return cls(record.sequence, qualities, name=record.name)

    def __repr__(self):
        return f"Read(name={self.name!r}, sequence={self.sequence!r})"

    def __len__(self):
        return len(self.sequence)

    def __getitem__(self, pos):
        return self.sequence[pos]

    def quality_or_default(self, pos: int) -> int:
        q = self.qualities[pos]
        return q if q > 1 else DEFAULT_BASE_QUALITY

    def has_valid_quality(self) -> bool:
        return any(q > 1 for q in self.qualities)

    def base_counts(self) -> BaseCounts:
        a = c = g = t = other = 0
        for base in self.sequence.upper():
            if base == "A":
                a += 1
            elif base == "C":
                c += 1
            elif base == "G":
                g += 1
            elif base in "TU":
                t += 1
            else:
                other += 1
        return BaseCounts(a, c, g, t, other)

    def percent_gc(self) -> float:
        """
        Return the GC content in percent. Only unambiguous bases and the
        two-base codes S (G or C) and W (A or T) are counted.
        """
        gc = at = 0
        for base in self.sequence.upper():
            if base in "ATUW":
                at += 1
            elif base in "CGS":
                gc += 1
        if gc + at == 0:
            return 0.0
        return gc * 100.0 / (gc + at)

    def reverse_complement(self) -> "Read":
        return Read(
            reverse_complement(self.sequence), self.qualities[::-1], name=self.name
        )

    def _matches_at(self, pos: int, query: str, both_strands: bool) -> bool:
        window = self.sequence[pos : pos + len(query)]
        if all(base_match(b, q) for b, q in zip(window, query)):
            return True
        if both_strands:
            rc = reverse_complement(query)
            return all(base_match(b, q) for b, q in zip(window, rc))
        return False

    def _check_search_range(self, start_pos: int, query: str, backward: bool = False):
        end = start_pos if backward else start_pos + len(query)
        if not 0 <= start_pos <= len(self) or end > len(self) or len(query) > len(self):
            raise ValueError(
                f"Cannot search for a query of length {len(query)} from position "
                f"{start_pos} in a read of length {len(self)}"
            )

    def search_forward(
        self, start_pos: int, query: str, both_strands: bool = False
    ) -> Optional[int]:
        """
        Return the first position at or after start_pos at which query matches
        exactly. A read base matches if it is covered by the IUPAC code in the
        query. If both_strands is set, the reverse complement of the query is
        also tried at each position.
        """
        self._check_search_range(start_pos, query)
        for i in range(start_pos, len(self) - len(query) + 1):
            if self._matches_at(i, query, both_strands):
                return i
        return None

    def search_backward(
        self, start_pos: int, query: str, both_strands: bool = False
    ) -> Optional[int]:
        """Like search_forward, but return the last match at or before start_pos"""
        self._check_search_range(start_pos, query, backward=True)
        for i in range(min(start_pos, len(self) - len(query)), -1, -1):
            if self._matches_at(i, query, both_strands):
                return i
        return None

    def find_next_n(self, start_pos: int) -> Optional[int]:
        for i in range(start_pos, len(self)):
            if self.sequence[i] in "Nn":
                return i
        return None

    def find_next_redundant(self, start_pos: int) -> Optional[int]:
        for i in range(start_pos, len(self)):
            if self.is_redundant(i):
                return i
        return None

    def is_redundant(self, pos: int) -> bool:
        return is_redundant(self.sequence[pos])
