"""
Read modifications that remove vector sequence from reads.

A modifier must be callable and is implemented as a class with a
__call__ method that receives a dnaio SequenceRecord and returns the
(possibly shortened) record.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

from dnaio import SequenceRecord

from .align import Match, VECTOR_MIN_MATCH, vector_search3, vector_search5
from .read import Read

logger = logging.getLogger(__name__)


class SingleEndModifier(ABC):
    @abstractmethod
    def __call__(self, read: SequenceRecord) -> SequenceRecord:
        pass


class VectorTrimmer(SingleEndModifier, ABC):
    """
    Find a vector sequence by quality-weighted alignment and remove it together
    with everything beyond it.

    Arguments:
        vector: Vector (or adapter) sequence. IUPAC wildcards are allowed.
        min_percent: Minimum score in percent of the score of a perfect match
        min_match: Number of vector bases that must align for a match to count
        quality_base: ASCII offset of the quality values in the records
    """

    def __init__(
        self,
        vector: str,
        min_percent: int,
        min_match: int = VECTOR_MIN_MATCH,
        quality_base: int = 33,
    ):
        if not vector:
            raise ValueError("The vector sequence must not be empty")
        self.vector = vector
        self.min_percent = min_percent
        self.min_match = min_match
        self.quality_base = quality_base
        self.with_vector = 0
        self.trimmed_bases = 0

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(vector={self.vector!r}, "
            f"min_percent={self.min_percent}, min_match={self.min_match})"
        )

    @abstractmethod
    def locate(self, read: Read) -> Optional[Match]:
        pass

    @abstractmethod
    def trim(self, record: SequenceRecord, match: Match) -> SequenceRecord:
        pass

    def __call__(self, record: SequenceRecord) -> SequenceRecord:
        match = self.locate(Read.from_record(record, self.quality_base))
        if match is None:
            return record
        trimmed = self.trim(record, match)
        removed = len(record) - len(trimmed)
        self.with_vector += 1
        self.trimmed_bases += removed
        logger.debug("Removed %d vector bases from read %s", removed, record.name)
        return trimmed


class FrontVectorTrimmer(VectorTrimmer):
    """Remove a vector found near the 5' end and all bases before it"""

    def locate(self, read: Read) -> Optional[Match]:
        return vector_search5(read, self.vector, self.min_percent, self.min_match)

    def trim(self, record: SequenceRecord, match: Match) -> SequenceRecord:
        return record[match.start + 1 :]


class BackVectorTrimmer(VectorTrimmer):
    """Remove a vector found near the 3' end and all bases after it"""

    def locate(self, read: Read) -> Optional[Match]:
        return vector_search3(read, 0, self.vector, self.min_percent, self.min_match)

    def trim(self, record: SequenceRecord, match: Match) -> SequenceRecord:
        return record[: match.start]
