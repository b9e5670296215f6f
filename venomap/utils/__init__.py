"""
Utility modules for VENOMAP.
"""

from .ids import (
    make_orf_id,
    parse_orf_id,
    strip_frame_suffix,
)
from .sequence import (
    detect_alphabet,
    reverse_complement,
    translate,
    translate_codon,
)

__all__ = [
    'reverse_complement',
    'translate_codon',
    'translate',
    'detect_alphabet',
    # Identifier conventions
    'make_orf_id',
    'parse_orf_id',
    'strip_frame_suffix',
]
