"""
kallisto quantification wrapper.

Used twice per run: once against the raw transcripts and once against
the candidate DNA regions.
"""

import logging
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..core.models import AbundanceRecord
from ..io.tables import read_abundance_table

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r'version\s+v?(\d+(?:\.\d+)*)')
ABUNDANCE_NAME = "abundance.tsv"


def parse_version(text: str) -> Optional[Tuple[int, ...]]:
    """Extract a numeric version tuple from kallisto's version output."""
    match = VERSION_PATTERN.search(text)
    if not match:
        return None
    return tuple(int(part) for part in match.group(1).split('.'))


def version_string(version: Tuple[int, ...]) -> str:
    return '.'.join(str(v) for v in version)


@dataclass
class QuantificationResult:
    """Result from a kallisto index + quant run."""
    success: bool
    output_dir: Path
    abundance_path: Optional[Path] = None
    abundance: Dict[str, AbundanceRecord] = field(default_factory=dict)
    error_message: Optional[str] = None


class KallistoRunner:
    """Manage kallisto availability, version and execution."""

    def __init__(
        self,
        executable: str = "kallisto",
        min_version: str = "0.46.0",
        fragment_length: int = 200,
        fragment_sd: int = 20,
        extra_args: Optional[List[str]] = None,
    ):
        self.executable = executable
        self.min_version = parse_version(f"version {min_version}")
        self.fragment_length = fragment_length
        self.fragment_sd = fragment_sd
        self.extra_args = extra_args or []
        self.version = self._detect_version()

    def _detect_version(self) -> Optional[Tuple[int, ...]]:
        """Run `kallisto version`; None if kallisto cannot be executed."""
        try:
            result = subprocess.run(
                [self.executable, 'version'],
                capture_output=True, timeout=10
            )
        except (FileNotFoundError, PermissionError, subprocess.TimeoutExpired):
            return None
        output = (result.stdout or b'').decode() + (result.stderr or b'').decode()
        return parse_version(output)

    def is_available(self) -> bool:
        """Check if kallisto could be executed."""
        return self.version is not None

    def check_version(self) -> List[str]:
        """Return a list of problems with the installed kallisto (empty if usable)."""
        if self.version is None:
            return [f"kallisto not found or not executable: {self.executable}"]
        if self.min_version and self.version < self.min_version:
            return [
                f"kallisto {version_string(self.version)} is older than the required "
                f"{version_string(self.min_version)}"
            ]
        return []

    def build_index_command(self, reference_fasta: Path, index_path: Path) -> List[str]:
        """Build kallisto index command."""
        return [self.executable, 'index', '-i', str(index_path), str(reference_fasta)]

    def build_quant_command(
        self,
        index_path: Path,
        reads: List[Path],
        output_dir: Path,
        threads: int = 4,
    ) -> List[str]:
        """Build kallisto quant command (single-end for one read file)."""
        cmd = [
            self.executable, 'quant',
            '-i', str(index_path),
            '-o', str(output_dir),
            '-t', str(threads),
        ]
        if len(reads) == 1:
            cmd.extend([
                '--single',
                '-l', str(self.fragment_length),
                '-s', str(self.fragment_sd),
            ])
        cmd.extend(self.extra_args)
        cmd.extend(str(r) for r in reads)
        return cmd

    def run(
        self,
        reference_fasta: Path,
        reads: List[Path],
        output_dir: Path,
        threads: int = 4,
    ) -> QuantificationResult:
        """
        Index a reference and quantify reads against it.

        Args:
            reference_fasta: Nucleotide FASTA to quantify against
            reads: One (single-end) or two (paired-end) FASTQ files
            output_dir: kallisto output directory
            threads: Number of threads

        Returns:
            QuantificationResult with the parsed abundance table
        """
        problems = self.check_version()
        if problems:
            return QuantificationResult(
                success=False,
                output_dir=output_dir,
                error_message="; ".join(problems),
            )

        output_dir.mkdir(parents=True, exist_ok=True)
        index_path = output_dir / "kallisto.idx"

        try:
            logger.info(f"Building kallisto index for {reference_fasta}")
            subprocess.run(
                self.build_index_command(reference_fasta, index_path),
                capture_output=True, check=True
            )

            cmd = self.build_quant_command(index_path, reads, output_dir, threads)
            logger.info(f"Running kallisto: {' '.join(cmd[:6])}...")
            subprocess.run(cmd, capture_output=True, check=True)

        except subprocess.CalledProcessError as e:
            return QuantificationResult(
                success=False,
                output_dir=output_dir,
                error_message=e.stderr.decode() if e.stderr else str(e),
            )
        except OSError as e:
            return QuantificationResult(
                success=False,
                output_dir=output_dir,
                error_message=str(e),
            )

        abundance_path = output_dir / ABUNDANCE_NAME
        if not abundance_path.exists():
            return QuantificationResult(
                success=False,
                output_dir=output_dir,
                error_message=f"kallisto output not found: {abundance_path}",
            )

        return QuantificationResult(
            success=True,
            output_dir=output_dir,
            abundance_path=abundance_path,
            abundance=read_abundance_table(abundance_path),
        )
