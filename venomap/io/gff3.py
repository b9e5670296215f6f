"""
Signal-peptide GFF3 parsing.

Only the sequence id column is used: any id listed in the predictor's
GFF3 is taken to carry a signal peptide.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List

from ..exceptions import FormatError, PipelineIOError

logger = logging.getLogger(__name__)


def parse_signal_ids(path: Path) -> List[str]:
    """
    Return column 1 of every data row of a GFF3 file.

    The first line is a header and is always skipped. Later comment and
    blank lines are skipped too. Order and duplicates are preserved.

    Raises:
        FormatError: If a data row is not tab-separated
        PipelineIOError: If the file cannot be read
    """
    ids = []
    try:
        with open(path) as f:
            for line_number, line in enumerate(f, start=1):
                if line_number == 1:
                    continue
                line = line.rstrip('\n').rstrip('\r')
                if not line.strip() or line.startswith('#'):
                    continue
                if '\t' not in line:
                    raise FormatError("expected tab-separated columns", filename=str(path),
                                      line_number=line_number)
                # SignalP writes the whole FASTA header as seqid
                seqid = line.split('\t', 1)[0].split()
                if not seqid:
                    raise FormatError("empty sequence id column", filename=str(path),
                                      line_number=line_number)
                ids.append(seqid[0])
    except OSError as e:
        raise PipelineIOError(str(e), filename=str(path)) from e

    logger.info(f"Read {len(ids)} signal-peptide rows from {path}")
    return ids


def signal_flags(signal_ids: Iterable[str], region_ids: Iterable[str]) -> Dict[str, bool]:
    """Map every region id to True if it appears among signal_ids."""
    positive = set(signal_ids)
    return {region_id: region_id in positive for region_id in region_ids}
