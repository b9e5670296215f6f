"""
Configuration classes for VENOMAP.

VENOMAP: Venom transcriptome toxin annotation and mapping

All run state (inputs, output directory, verbosity, tool settings) lives
in a PipelineConfig that is passed explicitly to the pipeline.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import List, Dict, Any, Optional
import yaml

from .exceptions import ConfigurationError


OUTPUT_TABLE_NAME = "toxin_candidates.tsv"
LOG_FILE_NAME = "venomap.log"
INTERMEDIATE_DIR_NAME = "intermediate"


@dataclass
class ClassifierConfig:
    """
    HMM family classifier settings.

    The command is a template with {input}, {output} and {threads}
    placeholders. It must write the classifier table to {output}.
    """
    command: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Dict) -> 'ClassifierConfig':
        return cls(command=d.get('command'))


@dataclass
class SignalPConfig:
    """SignalP 6 settings."""
    executable: str = "signalp6"
    organism: str = "eukarya"
    mode: str = "fast"
    extra_args: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict) -> 'SignalPConfig':
        return cls(
            executable=d.get('executable', 'signalp6'),
            organism=d.get('organism', 'eukarya'),
            mode=d.get('mode', 'fast'),
            extra_args=[str(a) for a in d.get('extra_args', [])],
        )


@dataclass
class KallistoConfig:
    """kallisto quantification settings."""
    executable: str = "kallisto"
    min_version: str = "0.46.0"
    fragment_length: int = 200  # single-end reads only
    fragment_sd: int = 20
    extra_args: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict) -> 'KallistoConfig':
        return cls(
            executable=d.get('executable', 'kallisto'),
            min_version=str(d.get('min_version', '0.46.0')),
            fragment_length=int(d.get('fragment_length', 200)),
            fragment_sd=int(d.get('fragment_sd', 20)),
            extra_args=[str(a) for a in d.get('extra_args', [])],
        )


@dataclass
class PipelineConfig:
    """Full pipeline configuration."""
    transcripts: Path
    output_dir: Path

    # RNA-seq reads for both abundance passes (1 file = single-end, 2 = paired)
    reads: List[Path] = field(default_factory=list)

    # Processing options
    threads: int = 4
    verbose: bool = False
    force: bool = False
    keep_intermediate: bool = True

    # Precomputed collaborator outputs; the matching tool is skipped when set
    classifier_table: Optional[Path] = None
    signal_gff3: Optional[Path] = None
    raw_abundance: Optional[Path] = None
    candidate_abundance: Optional[Path] = None

    # Tool settings
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    signalp: SignalPConfig = field(default_factory=SignalPConfig)
    kallisto: KallistoConfig = field(default_factory=KallistoConfig)

    def __post_init__(self):
        self.transcripts = Path(self.transcripts)
        self.output_dir = Path(self.output_dir)
        self.reads = [Path(r) for r in self.reads]
        for name in ('classifier_table', 'signal_gff3', 'raw_abundance', 'candidate_abundance'):
            value = getattr(self, name)
            if value is not None:
                setattr(self, name, Path(value))

    @property
    def output_table(self) -> Path:
        return self.output_dir / OUTPUT_TABLE_NAME

    @property
    def log_file(self) -> Path:
        return self.output_dir / LOG_FILE_NAME

    @property
    def intermediate_dir(self) -> Path:
        return self.output_dir / INTERMEDIATE_DIR_NAME

    @property
    def needs_quantifier(self) -> bool:
        return self.raw_abundance is None or self.candidate_abundance is None

    def validate(self) -> 'PipelineConfig':
        """Check the configuration, raising ConfigurationError on problems."""
        errors = []

        if not self.transcripts.is_file():
            errors.append(f"Transcript file not found: {self.transcripts}")

        if self.threads < 1:
            errors.append("threads must be >= 1")

        if self.classifier_table is None and not self.classifier.command:
            errors.append("Provide a classifier command or a precomputed classifier table")

        if self.needs_quantifier and len(self.reads) not in (1, 2):
            errors.append("Provide one (single-end) or two (paired-end) read files, "
                          "or both precomputed abundance tables")

        for read_path in self.reads:
            if not read_path.is_file():
                errors.append(f"Read file not found: {read_path}")

        for name in ('classifier_table', 'signal_gff3', 'raw_abundance', 'candidate_abundance'):
            value = getattr(self, name)
            if value is not None and not value.is_file():
                errors.append(f"{name} file not found: {value}")

        if self.kallisto.fragment_length <= 0 or self.kallisto.fragment_sd <= 0:
            errors.append("kallisto fragment_length and fragment_sd must be positive")

        if errors:
            raise ConfigurationError("; ".join(errors))
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a YAML-friendly dictionary."""
        d = asdict(self)
        for key, value in d.items():
            if isinstance(value, Path):
                d[key] = str(value)
        d['reads'] = [str(r) for r in self.reads]
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PipelineConfig':
        """Create from a dictionary (as loaded from YAML)."""
        if 'transcripts' not in data:
            raise ConfigurationError("Configuration must define 'transcripts'")

        reads = data.get('reads', [])
        if isinstance(reads, str):
            reads = [reads]

        try:
            return cls(
                transcripts=Path(data['transcripts']),
                output_dir=Path(data.get('output_dir', './results')),
                reads=reads,
                threads=int(data.get('threads', 4)),
                verbose=bool(data.get('verbose', False)),
                force=bool(data.get('force', False)),
                keep_intermediate=bool(data.get('keep_intermediate', True)),
                classifier_table=data.get('classifier_table'),
                signal_gff3=data.get('signal_gff3'),
                raw_abundance=data.get('raw_abundance'),
                candidate_abundance=data.get('candidate_abundance'),
                classifier=ClassifierConfig.from_dict(data.get('classifier') or {}),
                signalp=SignalPConfig.from_dict(data.get('signalp') or {}),
                kallisto=KallistoConfig.from_dict(data.get('kallisto') or {}),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration value: {e}") from e

    @classmethod
    def from_yaml(cls, path: Path) -> 'PipelineConfig':
        """Load configuration from YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")

        return cls.from_dict(data)


CONFIG_TEMPLATE = '''# VENOMAP Configuration Template
# Edit this file to configure your analysis

# Required: assembled venom-gland transcripts (FASTA, optionally gzipped)
transcripts: transcripts.fasta.gz

# RNA-seq reads used for both abundance passes
# One file for single-end, two for paired-end
reads:
  - reads_R1.fastq.gz
  - reads_R2.fastq.gz

# Output directory
output_dir: ./results

# Processing options
threads: 8
keep_intermediate: true

# HMM family classifier. The command must write a tab-separated table
# (id, family, -, target_region, -, family_description) to {output}.
classifier:
  command: "toxin_classifier --fasta {input} --out {output} --cpu {threads}"

# Signal-peptide prediction
signalp:
  executable: signalp6
  organism: eukarya
  mode: fast

# Abundance quantification
kallisto:
  executable: kallisto
  min_version: "0.46.0"
  fragment_length: 200   # single-end only
  fragment_sd: 20

# Optional: reuse collaborator outputs from an earlier run
# classifier_table: results/intermediate/classifier.tsv
# signal_gff3: results/intermediate/signalp/output.gff3
# raw_abundance: results/intermediate/kallisto_raw/abundance.tsv
# candidate_abundance: results/intermediate/kallisto_candidates/abundance.tsv
'''
