"""
Alignment-based search of a query (primer, vector or adapter fragment) in a read

All functions in this module share one substitution matrix that is aware of
IUPAC ambiguity codes. It is built once per process on first use (see
scoring_matrix()).

The functions return a Match if the query was found and None otherwise.
"""
__all__ = [
    "Match",
    "ScoringMatrix",
    "build_matrix",
    "scoring_matrix",
    "format_matrix",
    "compute_min_score",
    "search",
    "search_by_alignment_forward",
    "search_by_alignment_backward",
    "vector_search5",
    "vector_search3",
]

import logging
import math
import threading
from typing import NamedTuple, Optional, Tuple

from .iupac import IUPAC_CODES, INDEX_COUNT, base_flags, iupac_index, iupac_indices
from .read import Read

logger = logging.getLogger(__name__)

MATCH = 2
MISMATCH = -6
GAP_OPEN = -4
GAP_EXTEND = 2 * GAP_OPEN

# Quality used for N bases in the quality-weighted searches
N_QUALITY = 5

VECTOR_MIN_MATCH = 11

ScoringMatrix = Tuple[Tuple[int, ...], ...]


class Match(NamedTuple):
    start: int
    score: int


def build_matrix(match: int, mismatch: int) -> ScoringMatrix:
    """
    Return the substitution matrix for all pairs of IUPAC codes.

    Two unambiguous bases score match if they are equal and mismatch otherwise.
    If an ambiguity code is involved, the score is interpolated between mismatch
    and match depending on the fraction of base pairs the two codes have in
    common. Codes without any common base and the undefined index always score
    mismatch.
    """
    rows = [[mismatch] * INDEX_COUNT for _ in range(INDEX_COUNT)]
    codes = list(IUPAC_CODES)
    for i, code1 in enumerate(codes):
        flags1 = base_flags(code1)
        count1 = bin(flags1).count("1")
        for j, code2 in enumerate(codes):
            flags2 = base_flags(code2)
            count2 = bin(flags2).count("1")
            matches = bin(flags1 & flags2).count("1")
            if not matches:
                continue
            if count1 + count2 > 2:
                fraction = math.sqrt(matches / (count1 * count2))
                # round half up
                rows[i][j] = mismatch + int((match - mismatch) * fraction + 0.5)
            else:
                rows[i][j] = match
    return tuple(tuple(row) for row in rows)


_matrix: Optional[ScoringMatrix] = None
_matrix_lock = threading.Lock()


def scoring_matrix() -> ScoringMatrix:
    """
    Return the shared scoring matrix, building it if this is the first call.

    The build is guarded by a lock so that concurrent first calls build the
    matrix only once. Afterwards, the matrix is read-only.
    """
    global _matrix
    if _matrix is None:
        with _matrix_lock:
            if _matrix is None:
                _matrix = build_matrix(MATCH, MISMATCH)
                logger.debug(
                    "Built %dx%d scoring matrix (match=%d, mismatch=%d)",
                    INDEX_COUNT,
                    INDEX_COUNT,
                    MATCH,
                    MISMATCH,
                )
    return _matrix


def format_matrix(matrix: ScoringMatrix) -> str:
    """Return the scoring matrix as a table with IUPAC codes as headers"""
    labels = list(IUPAC_CODES) + ["?"]
    lines = ["   " + "".join(f"{label:>4}" for label in labels)]
    for label, row in zip(labels, matrix):
        lines.append(f"{label:>3}" + "".join(f"{score:4d}" for score in row))
    return "\n".join(lines)


def compute_min_score(length: int, min_percent: int) -> int:
    """
    Return the minimum score an alignment of a query of the given length
    must reach to be reported, as percentage between the score of an
    all-gap alignment (0%) and that of a perfect match (100%).
    """
    # Integer division truncates toward zero
    return length * GAP_OPEN + int(length * (MATCH - GAP_OPEN) * min_percent / 100)


def search(
    read: Read,
    window_start: int,
    window_end: int,
    max_result: int,
    query: str,
    min_percent: int,
) -> Optional[Match]:
    """
    Find an occurrence of query in read[window_start:window_end].

    The window is scanned by local alignment from its end toward its start.
    For each read position, the score of the best alignment of the full query
    that begins there is computed; positions at which this score reaches a
    local maximum of at least the minimum score are candidates.

    If max_result is less than the read length, the search is "backwards": the
    first candidate found that starts at or before max_result is returned.
    Otherwise, the whole window is scanned and the leftmost candidate is
    returned.
    """
    across = len(query)
    window_end = min(window_end, len(read))
    if not across or window_end <= window_start:
        return None
    matrix = scoring_matrix()

    # Widen the window by one so that a match at window_start can be
    # recognized as a local maximum
    start = window_start - 1 if window_start else 0
    down = window_end - start
    query_indices = iupac_indices(query)

    scores = [(across - x) * GAP_OPEN for x in range(across)]
    backwards = max_result < len(read)
    min_score = compute_min_score(across, min_percent)

    prev_score = -1
    prev_score_2 = -1
    result = None
    for y in range(down - 1, -1, -1):
        row = matrix[iupac_index(read.sequence[start + y])]
        left = 0
        diagonal = 0
        for x in range(across - 1, -1, -1):
            match = diagonal + row[query_indices[x]]
            up = scores[x]
            left = max(match, max(left, up) + GAP_OPEN)
            scores[x] = left
            diagonal = up

        if (
            y + 1 < down
            and left <= prev_score
            and prev_score >= prev_score_2
            and prev_score >= min_score
            and (not backwards or start + y < max_result)
        ):
            result = Match(start + y + 1, prev_score)
            if backwards:
                break

        prev_score_2 = prev_score
        prev_score = left

    if result is None and window_start == 0 and prev_score >= min_score:
        result = Match(0, prev_score)

    logger.debug(
        "Search for %r in window %d:%d (min. score %d): %s",
        query,
        window_start,
        window_end,
        min_score,
        result,
    )
    return result


def search_by_alignment_forward(
    read: Read, start_pos: int, query: str, min_percent: int
) -> Optional[Match]:
    """Find the leftmost occurrence of query that starts at or after start_pos"""
    return search(read, start_pos, len(read), len(read), query, min_percent)


def search_by_alignment_backward(
    read: Read, start_pos: int, query: str, min_percent: int
) -> Optional[Match]:
    """Find the rightmost occurrence of query that starts at or before start_pos"""
    max_result = min(start_pos, len(read) - 1)
    return search(read, 0, len(read), max_result, query, min_percent)


def _row_and_quality(
    read: Read, pos: int, matrix: ScoringMatrix
) -> Tuple[Tuple[int, ...], int]:
    base = read.sequence[pos]
    if base.upper() == "N":
        quality = N_QUALITY
    else:
        quality = read.quality_or_default(pos)
    return matrix[iupac_index(base)], quality


def vector_search5(
    read: Read,
    query: str,
    min_percent: int,
    min_match: int = VECTOR_MIN_MATCH,
) -> Optional[Match]:
    """
    Find the best quality-weighted alignment of query, which is typically a
    vector or adapter sequence preceding the insert, scanning the read from
    its start to its end.

    Match, mismatch and gap scores at each read position are multiplied with
    the quality of that position. A candidate is scored by dividing its
    weighted score by the sum of the qualities involved. The returned start is
    the read position at which the aligned query ends.
    """
    across = len(query)
    length = len(read)
    if not across or not length:
        return None
    matrix = scoring_matrix()
    query_indices = iupac_indices(query)

    row, quality = _row_and_quality(read, 0, matrix)
    scores = [row[q] * quality for q in query_indices]
    qualities = [quality] * across
    penalties = [GAP_OPEN] * across

    min_score = compute_min_score(min_match, min_percent)
    first = min(across, min_match) - 1
    last = across - 1

    best_score = -1
    best_start = -1
    for y in range(1, length):
        row, quality = _row_and_quality(read, y, matrix)
        diagonal_score = scores[0]
        diagonal_quality = qualities[0]
        scores[0] = row[query_indices[0]] * quality
        qualities[0] = quality

        for x in range(1, across):
            match_score = diagonal_score + row[query_indices[x]] * quality
            match_quality = diagonal_quality + quality
            diagonal_score = scores[x]
            diagonal_quality = qualities[x]
            across_score = scores[x - 1] + penalties[x - 1] * quality

            score = diagonal_score + penalties[x] * quality
            cell_quality = diagonal_quality + quality
            penalty = GAP_EXTEND
            # The last column always takes the gap across
            if score < across_score or x == last:
                score = across_score
                cell_quality = qualities[x - 1] + quality
            if score < match_score:
                score = match_score
                cell_quality = match_quality
                penalty = GAP_OPEN
            scores[x] = score
            qualities[x] = cell_quality
            penalties[x] = penalty

        if y >= first:
            # Truncate toward zero
            score = int(scores[last] / qualities[last])
            if best_score < score and score >= min_score:
                best_score = score
                best_start = y

    logger.debug(
        "5' vector search for %r: start=%d, score=%d", query, best_start, best_score
    )
    if best_start < 0:
        return None
    return Match(best_start, best_score)


def vector_search3(
    read: Read,
    start_pos: int,
    query: str,
    min_percent: int,
    min_match: int = VECTOR_MIN_MATCH,
) -> Optional[Match]:
    """
    Find the best quality-weighted alignment of query, which is typically a
    vector or adapter sequence following the insert, in read[start_pos:].

    This is the mirror image of vector_search5: The read is scanned from its
    end toward start_pos and the query is aligned from its last character. The
    returned start is the read position at which the aligned query begins.
    """
    across = len(query)
    down = len(read) - start_pos
    if not across or down <= 0:
        return None
    matrix = scoring_matrix()
    query_indices = iupac_indices(query)
    last = across - 1

    row, quality = _row_and_quality(read, start_pos + down - 1, matrix)
    scores = [row[q] * quality for q in query_indices]
    qualities = [quality] * across
    penalties = [GAP_OPEN] * across

    min_score = compute_min_score(min_match, min_percent)
    first = down - min(across, min_match)

    best_score = -1
    best_start = -1
    for y in range(down - 2, -1, -1):
        row, quality = _row_and_quality(read, start_pos + y, matrix)
        diagonal_score = scores[last]
        diagonal_quality = qualities[last]
        scores[last] = row[query_indices[last]] * quality
        qualities[last] = quality

        for x in range(across - 2, -1, -1):
            match_score = diagonal_score + row[query_indices[x]] * quality
            match_quality = diagonal_quality + quality
            diagonal_score = scores[x]
            diagonal_quality = qualities[x]
            across_score = scores[x + 1] + penalties[x + 1] * quality

            score = diagonal_score + penalties[x] * quality
            cell_quality = diagonal_quality + quality
            penalty = GAP_EXTEND
            # The first column always takes the gap across
            if score < across_score or x == 0:
                score = across_score
                cell_quality = qualities[x + 1] + quality
            if score < match_score:
                score = match_score
                cell_quality = match_quality
                penalty = GAP_OPEN
            scores[x] = score
            qualities[x] = cell_quality
            penalties[x] = penalty

        if y <= first:
            score = int(scores[0] / qualities[0])
            if best_score < score and score >= min_score:
                best_score = score
                best_start = y

    logger.debug(
        "3' vector search for %r: start=%d, score=%d", query, best_start, best_score
    )
    if best_start < 0:
        return None
    return Match(start_pos + best_start, best_score)
