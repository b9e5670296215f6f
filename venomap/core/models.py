"""
Data models for VENOMAP toxin candidate annotation.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ClassifierMatch:
    """
    One classifier hit.

    Attributes:
        orf_id: ORF identifier (<transcript>_frame=<n>)
        family: Toxin family label
        description: Family description
        target_region: Matched protein substring
    """
    orf_id: str
    family: str
    description: str
    target_region: str


@dataclass
class ExtendedRegion:
    """
    A classifier match extended to ORF boundaries.

    Attributes:
        region_id: ORF identifier the region was found in
        protein: Extended protein substring
        family: Classifier family label
        description: Classifier family description
        dna: Nucleotide slice for the region (filled by the coordinate mapper)
        signal_peptide: None until signal evidence is merged
    """
    region_id: str
    protein: str
    family: str = ""
    description: str = ""
    dna: str = ""
    signal_peptide: Optional[bool] = None

    def header(self) -> str:
        """FASTA header carrying FAM/FAMDESC and, once known, SIG tags."""
        header = f"{self.region_id} FAM={self.family} FAMDESC={self.description}"
        if self.signal_peptide is not None:
            header += " SIG=YES" if self.signal_peptide else " SIG=NO"
        return header


@dataclass
class AbundanceRecord:
    """Abundance estimate for one quantified target."""
    target_id: str
    tpm: float


@dataclass
class OutputRecord:
    """One row of the final annotation table."""
    sequence_id: str
    family: str
    raw_tpm: float
    transcripts_tpm: float
    sequence: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sequence_id': self.sequence_id,
            'family': self.family,
            'raw_tpm': self.raw_tpm,
            'transcripts_tpm': self.transcripts_tpm,
            'sequence': self.sequence,
        }
