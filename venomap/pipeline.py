"""
Main pipeline orchestration for VENOMAP.

Stages run strictly in order: six-frame translation, classification,
extension, DNA back-mapping, signal-peptide tagging, two abundance passes
and the final merge. Each stage takes and returns explicit objects; the
FASTA/TSV files written along the way exist for the external tools and
for inspection.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

from .config import PipelineConfig
from .core.extension import extend_matches
from .core.mapping import map_regions
from .core.merge import merge_annotations
from .core.models import AbundanceRecord, ClassifierMatch, ExtendedRegion, OutputRecord
from .core.orf import write_six_frame_fasta
from .exceptions import CollaboratorError, ConfigurationError, FormatError
from .integrations.classifier import ClassifierRunner
from .integrations.kallisto import KallistoRunner
from .integrations.signalp import SignalPeptideRunner
from .io.fasta import SequenceStore, write_fasta
from .io.gff3 import parse_signal_ids, signal_flags
from .io.tables import read_abundance_table, read_classifier_table, write_output_table
from .utils.sequence import detect_alphabet

logger = logging.getLogger(__name__)


@dataclass
class PipelineState:
    """Track intermediate files produced during a run."""
    work_dir: Path
    transcripts_fasta: Optional[Path] = None
    orf_fasta: Optional[Path] = None
    classifier_table: Optional[Path] = None
    candidate_protein_fasta: Optional[Path] = None
    candidate_dna_fasta: Optional[Path] = None
    annotated_protein_fasta: Optional[Path] = None
    annotated_dna_fasta: Optional[Path] = None
    signal_gff3: Optional[Path] = None
    raw_abundance: Optional[Path] = None
    candidate_abundance: Optional[Path] = None
    stores: List[SequenceStore] = field(default_factory=list)

    def open_store(self, path: Path) -> SequenceStore:
        """Open a SequenceStore indexed inside the work directory."""
        store = SequenceStore(path, work_dir=self.work_dir / "index")
        self.stores.append(store)
        return store

    def close(self):
        for store in self.stores:
            store.close()
        self.stores = []


def check_transcript_alphabet(store: SequenceStore):
    """Reject an amino-acid transcript file before translation."""
    for transcript_id, sequence in store.items():
        if detect_alphabet(sequence) != 'nucleotide':
            raise FormatError(
                f"first record {transcript_id} is not a nucleotide sequence; "
                "transcripts must be DNA",
                filename=str(store.path),
            )
        return


def apply_signal_flags(regions: List[ExtendedRegion], signal_ids: List[str]) -> List[ExtendedRegion]:
    """Set signal_peptide on every region from the predictor's id list."""
    flags = signal_flags(signal_ids, (r.region_id for r in regions))
    for region in regions:
        region.signal_peptide = flags[region.region_id]
    n_signal = sum(1 for r in regions if r.signal_peptide)
    logger.info(f"{n_signal}/{len(regions)} candidates carry a predicted signal peptide")
    return regions


def write_region_fasta(regions: List[ExtendedRegion], output_path: Path, kind: str,
                       annotated: bool = True) -> Path:
    """
    Write extended regions as protein or DNA FASTA.

    Args:
        regions: Extended regions
        output_path: Output FASTA path
        kind: 'protein' or 'dna'
        annotated: Use FAM/FAMDESC/SIG headers instead of bare ids
    """
    if kind not in ('protein', 'dna'):
        raise ValueError(f"Unknown region FASTA kind: {kind}")
    records = (
        (r.header() if annotated else r.region_id, r.protein if kind == 'protein' else r.dna)
        for r in regions
    )
    return write_fasta(records, output_path)


class AnnotationPipeline:
    """Main pipeline orchestrator."""

    def __init__(self, config: PipelineConfig):
        self.config = config
        self.classifier = ClassifierRunner(config.classifier.command)
        self.signalp = SignalPeptideRunner(
            executable=config.signalp.executable,
            organism=config.signalp.organism,
            mode=config.signalp.mode,
            extra_args=config.signalp.extra_args,
        )
        self._kallisto = None

    @property
    def kallisto(self) -> KallistoRunner:
        """kallisto runner, created on first use (it probes the executable)."""
        if self._kallisto is None:
            cfg = self.config.kallisto
            self._kallisto = KallistoRunner(
                executable=cfg.executable,
                min_version=cfg.min_version,
                fragment_length=cfg.fragment_length,
                fragment_sd=cfg.fragment_sd,
                extra_args=cfg.extra_args,
            )
        return self._kallisto

    def prepare_output_dir(self) -> Path:
        """Create the output directory, refusing to overwrite a finished run."""
        output_dir = self.config.output_dir
        if self.config.output_table.exists() and not self.config.force:
            raise ConfigurationError(
                f"{self.config.output_table} already exists; use --force to overwrite"
            )
        output_dir.mkdir(parents=True, exist_ok=True)
        self.config.intermediate_dir.mkdir(parents=True, exist_ok=True)

        with open(output_dir / "run_config.yaml", 'w') as f:
            yaml.safe_dump(self.config.to_dict(), f, default_flow_style=False, sort_keys=False)

        return output_dir

    def run(self) -> List[OutputRecord]:
        """
        Run the full pipeline.

        Returns:
            OutputRecord list, also written to the output table
        """
        self.prepare_output_dir()
        state = PipelineState(work_dir=self.config.intermediate_dir)

        try:
            records = self._run_stages(state)
        finally:
            state.close()

        if not self.config.keep_intermediate:
            shutil.rmtree(self.config.intermediate_dir, ignore_errors=True)

        return records

    def _run_stages(self, state: PipelineState) -> List[OutputRecord]:
        work = state.work_dir

        # Step 1: Six-frame translation
        logger.info(f"Loading transcripts from {self.config.transcripts}")
        dna_store = state.open_store(self.config.transcripts)
        state.transcripts_fasta = dna_store.fasta_path
        check_transcript_alphabet(dna_store)

        logger.info("Translating transcripts in six frames...")
        state.orf_fasta = write_six_frame_fasta(dna_store, work / "orfs.faa")
        orf_store = state.open_store(state.orf_fasta)

        # Step 2: Family classification
        matches = self.classify(state)

        # Step 3: Extension and DNA back-mapping
        regions = extend_matches(matches, orf_store)
        regions = map_regions(regions, orf_store, dna_store)
        state.candidate_protein_fasta = write_region_fasta(
            regions, work / "candidates.faa", 'protein')
        state.candidate_dna_fasta = write_region_fasta(
            regions, work / "candidates.fna", 'dna', annotated=False)

        if not regions:
            logger.warning("No classifier matches; writing an empty result table")
            write_output_table([], self.config.output_table)
            return []

        # Step 4: Signal peptides
        regions = apply_signal_flags(regions, self.predict_signal_peptides(state))
        state.annotated_protein_fasta = write_region_fasta(
            regions, work / "candidates.annotated.faa", 'protein')
        state.annotated_dna_fasta = write_region_fasta(
            regions, work / "candidates.annotated.fna", 'dna')

        # Step 5: Abundance, raw transcripts then candidate regions
        raw, state.raw_abundance = self.quantify(
            'raw', state.transcripts_fasta, self.config.raw_abundance, work)
        candidates, state.candidate_abundance = self.quantify(
            'candidates', state.candidate_dna_fasta, self.config.candidate_abundance, work)

        # Step 6: Merge
        annotated_store = state.open_store(state.annotated_protein_fasta)
        records = merge_annotations(raw, candidates, annotated_store)
        write_output_table(records, self.config.output_table)
        return records

    def classify(self, state: PipelineState) -> List[ClassifierMatch]:
        """Run the classifier, or load a precomputed table."""
        if self.config.classifier_table is not None:
            logger.info(f"Using precomputed classifier table {self.config.classifier_table}")
            state.classifier_table = self.config.classifier_table
            return read_classifier_table(self.config.classifier_table)

        result = self.classifier.run(
            state.orf_fasta,
            state.work_dir / "classifier.tsv",
            threads=self.config.threads,
        )
        if not result.success:
            raise CollaboratorError("classifier", result.error_message or "unknown error")
        state.classifier_table = result.table_path
        return result.matches

    def predict_signal_peptides(self, state: PipelineState) -> List[str]:
        """Run SignalP, or load a precomputed GFF3."""
        if self.config.signal_gff3 is not None:
            logger.info(f"Using precomputed signal-peptide GFF3 {self.config.signal_gff3}")
            state.signal_gff3 = self.config.signal_gff3
            return parse_signal_ids(self.config.signal_gff3)

        result = self.signalp.run(state.candidate_protein_fasta, state.work_dir / "signalp")
        if not result.success:
            raise CollaboratorError("SignalP", result.error_message or "unknown error")
        state.signal_gff3 = result.gff3_path
        return result.signal_ids

    def quantify(
        self,
        label: str,
        reference_fasta: Path,
        precomputed: Optional[Path],
        work_dir: Path,
    ) -> Tuple[Dict[str, AbundanceRecord], Path]:
        """
        Run one kallisto pass, or load a precomputed abundance table.

        Returns:
            (abundance map in file order, path of the abundance table)
        """
        if precomputed is not None:
            logger.info(f"Using precomputed {label} abundance table {precomputed}")
            return read_abundance_table(precomputed), precomputed

        logger.info(f"Quantifying {label} sequences...")
        result = self.kallisto.run(
            reference_fasta,
            self.config.reads,
            work_dir / f"kallisto_{label}",
            threads=self.config.threads,
        )
        if not result.success:
            raise CollaboratorError("kallisto", result.error_message or "unknown error")
        return result.abundance, result.abundance_path
