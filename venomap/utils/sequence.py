"""
Sequence manipulation utilities.

Provides reverse complement, codon translation and alphabet detection
for transcript and ORF sequences.
"""

import re


NUCLEOTIDE_PATTERN = re.compile(r'^[ACGTUNacgtun\-]*$')

START_RESIDUE = 'M'
STOP_RESIDUE = '*'

CODON_TABLE = {
    'TTT': 'F', 'TTC': 'F', 'TTA': 'L', 'TTG': 'L',
    'TCT': 'S', 'TCC': 'S', 'TCA': 'S', 'TCG': 'S',
    'TAT': 'Y', 'TAC': 'Y', 'TAA': '*', 'TAG': '*',
    'TGT': 'C', 'TGC': 'C', 'TGA': '*', 'TGG': 'W',
    'CTT': 'L', 'CTC': 'L', 'CTA': 'L', 'CTG': 'L',
    'CCT': 'P', 'CCC': 'P', 'CCA': 'P', 'CCG': 'P',
    'CAT': 'H', 'CAC': 'H', 'CAA': 'Q', 'CAG': 'Q',
    'CGT': 'R', 'CGC': 'R', 'CGA': 'R', 'CGG': 'R',
    'ATT': 'I', 'ATC': 'I', 'ATA': 'I', 'ATG': 'M',
    'ACT': 'T', 'ACC': 'T', 'ACA': 'T', 'ACG': 'T',
    'AAT': 'N', 'AAC': 'N', 'AAA': 'K', 'AAG': 'K',
    'AGT': 'S', 'AGC': 'S', 'AGA': 'R', 'AGG': 'R',
    'GTT': 'V', 'GTC': 'V', 'GTA': 'V', 'GTG': 'V',
    'GCT': 'A', 'GCC': 'A', 'GCA': 'A', 'GCG': 'A',
    'GAT': 'D', 'GAC': 'D', 'GAA': 'E', 'GAG': 'E',
    'GGT': 'G', 'GGC': 'G', 'GGA': 'G', 'GGG': 'G',
}


def reverse_complement(seq: str) -> str:
    """Return reverse complement of DNA sequence."""
    complement = {
        'A': 'T', 'T': 'A', 'G': 'C', 'C': 'G', 'N': 'N',
        'a': 't', 't': 'a', 'g': 'c', 'c': 'g', 'n': 'n'
    }
    return ''.join(complement.get(base, 'N') for base in reversed(seq))


def translate_codon(codon: str) -> str:
    """Translate a DNA codon to amino acid (single letter).

    Returns '*' for stop codons, 'X' for ambiguous or invalid codons.
    """
    return CODON_TABLE.get(codon.upper().replace('U', 'T'), 'X')


def translate(seq: str, offset: int = 0) -> str:
    """
    Translate a DNA sequence from the given reading offset.

    Translation runs to the end of the sequence. A trailing partial codon
    is dropped and stop codons are kept as '*'.

    Args:
        seq: DNA sequence
        offset: Reading offset (0, 1 or 2)

    Returns:
        Amino-acid sequence
    """
    if offset < 0:
        raise ValueError(f"Offset must be non-negative, got {offset}")
    end = offset + (len(seq) - offset) // 3 * 3
    return ''.join(translate_codon(seq[i:i + 3]) for i in range(offset, end, 3))


def is_nucleotide_sequence(seq: str) -> bool:
    """Check if a sequence uses only nucleotide symbols (empty counts as DNA)."""
    return bool(NUCLEOTIDE_PATTERN.match(seq))


def detect_alphabet(seq: str) -> str:
    """Return 'nucleotide' or 'protein' for a sequence."""
    return 'nucleotide' if is_nucleotide_sequence(seq) else 'protein'
