"""
SignalP 6 integration wrapper.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..io.gff3 import parse_signal_ids

logger = logging.getLogger(__name__)

GFF3_NAME = "output.gff3"


@dataclass
class SignalPResult:
    """Result from a SignalP run."""
    success: bool
    output_dir: Path
    gff3_path: Optional[Path] = None
    signal_ids: List[str] = field(default_factory=list)
    error_message: Optional[str] = None


class SignalPeptideRunner:
    """Handle SignalP 6 execution."""

    def __init__(
        self,
        executable: str = "signalp6",
        organism: str = "eukarya",
        mode: str = "fast",
        extra_args: Optional[List[str]] = None,
    ):
        self.executable = executable
        self.organism = organism
        self.mode = mode
        self.extra_args = extra_args or []

    def is_available(self) -> bool:
        """Check if SignalP is on PATH."""
        return shutil.which(self.executable) is not None

    def build_command(self, input_fasta: Path, output_dir: Path) -> List[str]:
        """Build SignalP command."""
        cmd = [
            self.executable,
            '--fastafile', str(input_fasta),
            '--output_dir', str(output_dir),
            '--format', 'none',
            '--organism', self.organism,
            '--mode', self.mode,
        ]
        cmd.extend(self.extra_args)
        return cmd

    def run(self, input_fasta: Path, output_dir: Path) -> SignalPResult:
        """
        Predict signal peptides for a protein FASTA.

        Args:
            input_fasta: Extended candidate proteins
            output_dir: SignalP output directory

        Returns:
            SignalPResult with the ids listed in output.gff3
        """
        if not self.is_available():
            return SignalPResult(
                success=False,
                output_dir=output_dir,
                error_message=f"SignalP executable not found: {self.executable}",
            )

        output_dir.mkdir(parents=True, exist_ok=True)
        cmd = self.build_command(input_fasta, output_dir)

        try:
            logger.info(f"Running SignalP: {' '.join(cmd)}")
            subprocess.run(cmd, capture_output=True, check=True)
        except subprocess.CalledProcessError as e:
            return SignalPResult(
                success=False,
                output_dir=output_dir,
                error_message=e.stderr.decode() if e.stderr else str(e),
            )
        except OSError as e:
            return SignalPResult(
                success=False,
                output_dir=output_dir,
                error_message=str(e),
            )

        return self._parse_results(output_dir)

    def _parse_results(self, output_dir: Path) -> SignalPResult:
        """Parse SignalP output files."""
        gff3_path = output_dir / GFF3_NAME
        if not gff3_path.exists():
            return SignalPResult(
                success=False,
                output_dir=output_dir,
                error_message=f"SignalP output not found: {gff3_path}",
            )

        return SignalPResult(
            success=True,
            output_dir=output_dir,
            gff3_path=gff3_path,
            signal_ids=parse_signal_ids(gff3_path),
        )
