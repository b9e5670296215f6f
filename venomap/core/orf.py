"""
Six-frame translation of transcripts.

Frames 1-3 translate the forward strand at offsets 0, 1 and 2; frames 4-6
apply the same offsets to the reverse complement. Translations run to the
end of the sequence and keep internal stop symbols.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List

from ..io.fasta import SequenceStore, write_fasta_record
from ..utils.ids import make_orf_id
from ..utils.sequence import reverse_complement, translate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ORF:
    """A labelled reading-frame translation of a transcript."""
    transcript_id: str
    frame: int
    sequence: str

    @property
    def orf_id(self) -> str:
        return make_orf_id(self.transcript_id, self.frame)

    @property
    def strand(self) -> str:
        return '+' if self.frame <= 3 else '-'

    @property
    def offset(self) -> int:
        return (self.frame - 1) % 3


def six_frame_translate(transcript_id: str, sequence: str) -> List[ORF]:
    """
    Translate a transcript in all six reading frames.

    Args:
        transcript_id: Transcript identifier
        sequence: Forward-strand DNA sequence

    Returns:
        Six ORF objects ordered by frame number
    """
    seq = sequence.upper()
    rc = reverse_complement(seq)

    orfs = []
    for frame in range(1, 7):
        strand_seq = seq if frame <= 3 else rc
        orfs.append(ORF(
            transcript_id=transcript_id,
            frame=frame,
            sequence=translate(strand_seq, (frame - 1) % 3),
        ))
    return orfs


def iter_six_frames(store: SequenceStore) -> Iterator[ORF]:
    """Yield six ORFs per transcript in store order."""
    for transcript_id, sequence in store.items():
        yield from six_frame_translate(transcript_id, sequence)


def write_six_frame_fasta(store: SequenceStore, output_path: Path) -> Path:
    """
    Write the six-frame translation of every transcript to a FASTA file.

    Args:
        store: SequenceStore over the transcript file
        output_path: Path for the protein FASTA

    Returns:
        Path to the written file
    """
    n_orfs = 0
    with open(output_path, 'w') as f:
        for orf in iter_six_frames(store):
            write_fasta_record(f, orf.orf_id, orf.sequence)
            n_orfs += 1

    logger.info(f"Wrote {n_orfs} frame translations for {len(store)} transcripts to {output_path}")
    return output_path
