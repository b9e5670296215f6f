"""
Core coordinate-mapping and annotation-merging modules for VENOMAP.
"""

from .models import (
    AbundanceRecord,
    ClassifierMatch,
    ExtendedRegion,
    OutputRecord,
)
from .orf import (
    ORF,
    six_frame_translate,
    write_six_frame_fasta,
)
from .extension import (
    extend_match,
    extend_matches,
    extend_region,
)
from .mapping import (
    DnaSpan,
    locate_region,
    map_region_to_dna,
    map_regions,
)
from .merge import (
    merge_annotations,
    parse_family,
)

__all__ = [
    # Models
    'ClassifierMatch',
    'ExtendedRegion',
    'AbundanceRecord',
    'OutputRecord',
    # Translation
    'ORF',
    'six_frame_translate',
    'write_six_frame_fasta',
    # Extension
    'extend_region',
    'extend_match',
    'extend_matches',
    # Coordinate mapping
    'DnaSpan',
    'locate_region',
    'map_region_to_dna',
    'map_regions',
    # Merge
    'merge_annotations',
    'parse_family',
]
