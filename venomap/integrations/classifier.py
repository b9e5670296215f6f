"""
HMM toxin-family classifier wrapper.

The classifier is driven by a user-supplied command template so any tool
that writes the expected six-column table can be plugged in.
"""

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..core.models import ClassifierMatch
from ..io.tables import read_classifier_table

logger = logging.getLogger(__name__)


@dataclass
class ClassifierResult:
    """Result from running the classifier."""
    success: bool
    table_path: Path
    matches: List[ClassifierMatch] = field(default_factory=list)
    error_message: Optional[str] = None


class ClassifierRunner:
    """Run the family classifier from a command template."""

    def __init__(self, command: Optional[str]):
        self.command = command

    @property
    def executable(self) -> Optional[str]:
        if not self.command:
            return None
        return shlex.split(self.command)[0]

    def is_available(self) -> bool:
        """Check that the classifier executable is on PATH."""
        exe = self.executable
        return bool(exe) and shutil.which(exe) is not None

    def build_command(self, input_fasta: Path, output_table: Path, threads: int = 1) -> List[str]:
        """Expand the command template into an argument list."""
        if not self.command:
            raise ValueError("No classifier command configured")
        values = {
            'input': str(input_fasta),
            'output': str(output_table),
            'threads': str(threads),
        }
        return [token.format(**values) for token in shlex.split(self.command)]

    def run(self, input_fasta: Path, output_table: Path, threads: int = 1) -> ClassifierResult:
        """
        Classify six-frame translations.

        Args:
            input_fasta: Six-frame protein FASTA
            output_table: Path the classifier writes its table to
            threads: Number of threads

        Returns:
            ClassifierResult with parsed matches
        """
        if not self.is_available():
            return ClassifierResult(
                success=False,
                table_path=output_table,
                error_message=f"Classifier executable not found: {self.executable}",
            )

        cmd = self.build_command(input_fasta, output_table, threads)

        try:
            logger.info(f"Running classifier: {' '.join(cmd)}")
            subprocess.run(cmd, capture_output=True, check=True)
        except subprocess.CalledProcessError as e:
            return ClassifierResult(
                success=False,
                table_path=output_table,
                error_message=e.stderr.decode() if e.stderr else str(e),
            )
        except OSError as e:
            return ClassifierResult(
                success=False,
                table_path=output_table,
                error_message=str(e),
            )

        if not output_table.exists():
            return ClassifierResult(
                success=False,
                table_path=output_table,
                error_message=f"Classifier did not write {output_table}",
            )

        return ClassifierResult(
            success=True,
            table_path=output_table,
            matches=read_classifier_table(output_table),
        )
