"""
Final join of classifier, signal-peptide and abundance evidence.

Rows follow the order of the second (candidate-level) abundance pass.
Each candidate id is reduced to its transcript id to look up the raw
transcript abundance from the first pass.
"""

import logging
import re
from typing import Dict, List, Optional

from ..exceptions import ConsistencyError, FormatError
from ..io.fasta import SequenceStore
from ..utils.ids import strip_frame_suffix
from .models import AbundanceRecord, OutputRecord

logger = logging.getLogger(__name__)

FAMILY_TOKEN = re.compile(r'(?:^|\s)FAM=(\S*)')
SIGNAL_TOKEN = re.compile(r'(?:^|\s)SIG=(YES|NO)(?:\s|$)')


def parse_family(header: str) -> str:
    """
    Extract the FAM=<value> token from a FASTA header.

    Raises:
        FormatError: If the header has no FAM= token
    """
    match = FAMILY_TOKEN.search(header)
    if not match:
        raise FormatError(f"no FAM= token in header '{header}'")
    return match.group(1)


def parse_signal(header: str) -> Optional[bool]:
    """Return True/False for a SIG=YES/NO token, None if absent."""
    match = SIGNAL_TOKEN.search(header)
    if not match:
        return None
    return match.group(1) == 'YES'


def merge_annotations(
    raw_abundance: Dict[str, AbundanceRecord],
    candidate_abundance: Dict[str, AbundanceRecord],
    annotated: SequenceStore,
) -> List[OutputRecord]:
    """
    Build one output row per candidate in the second abundance pass.

    Args:
        raw_abundance: Pass 1, keyed by transcript id
        candidate_abundance: Pass 2, keyed by extended-region id
        annotated: Annotated extended-region protein FASTA

    Returns:
        OutputRecord list in candidate_abundance order

    Raises:
        ConsistencyError: If a candidate's transcript is missing from pass 1
        RecordNotFoundError: If a candidate is missing from the FASTA
    """
    records = []
    for region_id, candidate in candidate_abundance.items():
        transcript_id = strip_frame_suffix(region_id)
        raw = raw_abundance.get(transcript_id)
        if raw is None:
            raise ConsistencyError(
                f"transcript {transcript_id} is missing from the raw abundance table",
                record_id=region_id,
            )

        header = annotated.header(region_id)
        try:
            family = parse_family(header)
        except FormatError as e:
            raise FormatError(str(e.args[0]), filename=str(annotated.path)) from None

        records.append(OutputRecord(
            sequence_id=transcript_id,
            family=family,
            raw_tpm=raw.tpm,
            transcripts_tpm=candidate.tpm,
            sequence=annotated.sequence(region_id),
        ))

    logger.info(f"Merged annotations for {len(records)} candidates")
    return records
