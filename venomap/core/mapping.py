"""
Back-mapping of extended protein regions to transcript DNA.

A residue at protein position p maps to nucleotide p * 3 of the parent
transcript, and a region of L residues spans 3 * L nucleotides.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List

from ..io.fasta import SequenceStore
from ..utils.ids import strip_frame_suffix
from ..exceptions import ConsistencyError
from .models import ExtendedRegion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DnaSpan:
    """Codon-aligned nucleotide span."""
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length


def locate_region(full_protein: str, region: str, region_id: str = "") -> DnaSpan:
    """
    Convert the position of region within full_protein to a DNA span.

    Raises:
        ConsistencyError: If region is not a substring of full_protein
    """
    offset_aa = full_protein.find(region)
    if offset_aa == -1:
        raise ConsistencyError(
            "extended region does not occur in the six-frame translation",
            record_id=region_id,
        )
    return DnaSpan(start=offset_aa * 3, length=len(region) * 3)


def slice_dna(dna: str, span: DnaSpan, region_id: str = "") -> str:
    """Cut span out of dna; the slice must have the full span length."""
    dna_slice = dna[span.start:span.end]
    if len(dna_slice) != span.length:
        raise ConsistencyError(
            f"DNA slice {span.start}-{span.end} runs past the transcript end ({len(dna)} nt)",
            record_id=region_id,
        )
    return dna_slice


def map_region_to_dna(
    region_id: str,
    orf_store: SequenceStore,
    region_store: SequenceStore,
    dna_store: SequenceStore,
) -> str:
    """
    Extract the transcript DNA for one extended region.

    Args:
        region_id: Extended-region (ORF) identifier
        orf_store: Six-frame translations before extension
        region_store: Extended protein regions
        dna_store: Transcript DNA

    Returns:
        DNA slice whose length is 3x the region length
    """
    transcript_id = strip_frame_suffix(region_id)
    span = locate_region(
        orf_store.sequence(region_id),
        region_store.sequence(region_id),
        region_id=region_id,
    )
    return slice_dna(dna_store.sequence(transcript_id), span, region_id=region_id)


def map_regions(
    regions: Iterable[ExtendedRegion],
    orf_store: SequenceStore,
    dna_store: SequenceStore,
) -> List[ExtendedRegion]:
    """
    Fill the dna field of each in-memory ExtendedRegion.

    Same arithmetic as map_region_to_dna, reading the extended protein
    from the region object instead of a FASTA file.
    """
    mapped = []
    for region in regions:
        span = locate_region(
            orf_store.sequence(region.region_id),
            region.protein,
            region_id=region.region_id,
        )
        region.dna = slice_dna(
            dna_store.sequence(strip_frame_suffix(region.region_id)),
            span,
            region_id=region.region_id,
        )
        mapped.append(region)

    logger.info(f"Mapped {len(mapped)} extended regions to transcript DNA")
    return mapped
