"""
Identifier conventions shared by every pipeline stage.

ORF identifiers are built as ``<transcript_id>_frame=<n>``. The two
abundance passes are keyed by transcript id and ORF id respectively, so
the merge relies on stripping that suffix back off.
"""

import re
from typing import Tuple

from ..exceptions import FormatError


FRAME_SUFFIX_PATTERN = re.compile(r'^(?P<base>.+)_frame=(?P<frame>[1-6])$')


def make_orf_id(transcript_id: str, frame: int) -> str:
    """Build the ORF identifier for a transcript and frame (1-6)."""
    if not 1 <= frame <= 6:
        raise ValueError(f"Frame must be between 1 and 6, got {frame}")
    return f"{transcript_id}_frame={frame}"


def strip_frame_suffix(record_id: str) -> str:
    """
    Remove the last underscore-delimited segment of an identifier.

    ``A_DN1_1_frame=2`` becomes ``A_DN1_1``. Transcript ids may contain
    underscores themselves, so only the final segment is removed.

    Args:
        record_id: ORF or extended-region identifier

    Returns:
        The transcript-level identifier

    Raises:
        FormatError: If the identifier has no underscore or an empty base
    """
    base, sep, _ = record_id.rpartition('_')
    if not sep or not base:
        raise FormatError(f"Identifier '{record_id}' has no '_<suffix>' segment to strip")
    return base


def parse_orf_id(orf_id: str) -> Tuple[str, int]:
    """Split an ORF id into (transcript_id, frame)."""
    match = FRAME_SUFFIX_PATTERN.match(orf_id)
    if not match:
        raise FormatError(f"'{orf_id}' is not a <transcript>_frame=<1-6> identifier")
    return match.group('base'), int(match.group('frame'))
