"""
Extension of classifier matches to open-reading-frame boundaries.

The classifier reports only the conserved core of a toxin. The region is
grown to the nearest upstream start (M) or stop (*) and to the nearest
downstream stop, recovering signal and propeptide regions.
"""

import logging
from typing import Iterable, List, Tuple

from ..exceptions import RecordNotFoundError
from ..io.fasta import SequenceStore
from ..utils.sequence import START_RESIDUE, STOP_RESIDUE
from .models import ClassifierMatch, ExtendedRegion

logger = logging.getLogger(__name__)


def left_boundary(left: str) -> int:
    """
    Cut position in the upstream flank.

    The first M wins if it lies after the last stop; otherwise the region
    starts just after that stop. With neither present nothing is trimmed.
    """
    m = left.find(START_RESIDUE)
    s = left.rfind(STOP_RESIDUE)
    if m > s:
        return m
    if m < s:
        return s + 1
    return 0


def right_boundary(right: str) -> int:
    """End position in the downstream flank: first stop, or the full flank."""
    r = right.find(STOP_RESIDUE)
    if r == -1:
        return len(right)
    return r


def split_flanks(seq: str, pattern: str) -> Tuple[str, str]:
    """Split seq around the first occurrence of pattern."""
    i = seq.find(pattern)
    if i == -1:
        raise RecordNotFoundError(pattern, source="protein sequence")
    return seq[:i], seq[i + len(pattern):]


def extend_region(seq: str, pattern: str) -> str:
    """
    Extend a matched substring to the flanking start and stop.

    Args:
        seq: Full protein sequence (one reading frame)
        pattern: Substring reported by the classifier

    Returns:
        left[l:] + pattern + right[:r]

    Raises:
        RecordNotFoundError: If pattern does not occur in seq
    """
    left, right = split_flanks(seq, pattern)
    return left[left_boundary(left):] + pattern + right[:right_boundary(right)]


def extend_match(match: ClassifierMatch, full_protein: str) -> ExtendedRegion:
    """Build the ExtendedRegion for a classifier match."""
    try:
        protein = extend_region(full_protein, match.target_region)
    except RecordNotFoundError:
        raise RecordNotFoundError(
            match.target_region, source=f"translation of {match.orf_id}"
        ) from None
    logger.debug(
        f"{match.orf_id}: extended {len(match.target_region)} aa match to {len(protein)} aa"
    )
    return ExtendedRegion(
        region_id=match.orf_id,
        protein=protein,
        family=match.family,
        description=match.description,
    )


def extend_matches(matches: Iterable[ClassifierMatch], orf_store: SequenceStore) -> List[ExtendedRegion]:
    """
    Extend every classifier match against its six-frame translation.

    Args:
        matches: Classifier hits
        orf_store: SequenceStore over the six-frame protein FASTA

    Returns:
        ExtendedRegion list in match order
    """
    regions = [extend_match(match, orf_store.sequence(match.orf_id)) for match in matches]
    logger.info(f"Extended {len(regions)} classifier matches to ORF boundaries")
    return regions
