"""
I/O modules for VENOMAP.
"""

from .fasta import (
    SequenceStore,
    write_fasta,
    write_fasta_record,
)
from .gff3 import (
    parse_signal_ids,
    signal_flags,
)
from .tables import (
    read_abundance_table,
    read_classifier_table,
    write_output_table,
)

__all__ = [
    'SequenceStore',
    'write_fasta',
    'write_fasta_record',
    'parse_signal_ids',
    'signal_flags',
    'read_classifier_table',
    'read_abundance_table',
    'write_output_table',
]
