"""
Tab-separated table I/O: classifier hits, abundance estimates and the
final annotation table.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List

import pandas as pd

from ..exceptions import FormatError, PipelineIOError
from ..core.models import AbundanceRecord, ClassifierMatch, OutputRecord

logger = logging.getLogger(__name__)

# Positional columns of the classifier table
CLASSIFIER_ID_COL = 0
CLASSIFIER_FAMILY_COL = 1
CLASSIFIER_REGION_COL = 3
CLASSIFIER_DESCRIPTION_COL = 5

OUTPUT_COLUMNS = ['sequence_id', 'family', 'raw_tpm', 'transcripts_tpm', 'sequence']


def _read_tsv(path: Path, **kwargs) -> pd.DataFrame:
    """Read a TSV as strings, translating pandas errors to pipeline errors."""
    try:
        df = pd.read_csv(path, sep='\t', dtype=str, keep_default_na=False, **kwargs)
    except FileNotFoundError as e:
        raise PipelineIOError("file does not exist", filename=str(path)) from e
    except pd.errors.EmptyDataError as e:
        raise FormatError("file is empty", filename=str(path)) from e
    except pd.errors.ParserError as e:
        raise FormatError(str(e), filename=str(path)) from e
    except OSError as e:
        raise PipelineIOError(str(e), filename=str(path)) from e
    # short rows leave NaN in trailing columns
    return df.fillna('')


def read_classifier_table(path: Path) -> List[ClassifierMatch]:
    """
    Load classifier hits.

    The table has a header row; columns are used by position:
    0 = ORF id, 1 = family, 3 = matched region, 5 = family description.
    Only the first hit per ORF is kept.

    Args:
        path: Classifier output table

    Returns:
        ClassifierMatch list in file order
    """
    df = _read_tsv(path)
    if df.shape[1] <= CLASSIFIER_DESCRIPTION_COL:
        raise FormatError(
            f"expected at least {CLASSIFIER_DESCRIPTION_COL + 1} columns, found {df.shape[1]}",
            filename=str(path),
        )

    matches = []
    seen = set()
    for row_number, row in enumerate(df.itertuples(index=False, name=None), start=2):
        orf_id = row[CLASSIFIER_ID_COL].strip()
        region = row[CLASSIFIER_REGION_COL].strip()
        if not orf_id or not region:
            raise FormatError("missing id or target region", filename=str(path),
                              line_number=row_number)
        if orf_id in seen:
            logger.warning(f"Ignoring additional classifier hit for {orf_id} (line {row_number})")
            continue
        seen.add(orf_id)
        matches.append(ClassifierMatch(
            orf_id=orf_id,
            family=row[CLASSIFIER_FAMILY_COL].strip(),
            description=row[CLASSIFIER_DESCRIPTION_COL].strip(),
            target_region=region,
        ))

    logger.info(f"Loaded {len(matches)} classifier hits from {path}")
    return matches


def read_abundance_table(path: Path) -> Dict[str, AbundanceRecord]:
    """
    Load an abundance table keyed by target_id, preserving file order.

    Raises:
        FormatError: If target_id/tpm columns are missing, a tpm value is
            not numeric or a target_id is repeated
    """
    df = _read_tsv(path)
    missing = [c for c in ('target_id', 'tpm') if c not in df.columns]
    if missing:
        raise FormatError(f"missing column(s): {', '.join(missing)}", filename=str(path))

    tpm = pd.to_numeric(df['tpm'], errors='coerce')
    bad = tpm.isna()
    if bad.any():
        first = int(bad.values.argmax())
        raise FormatError(
            f"non-numeric tpm '{df['tpm'].iloc[first]}' for {df['target_id'].iloc[first]}",
            filename=str(path),
            line_number=first + 2,
        )

    dup = df['target_id'].duplicated()
    if dup.any():
        first = int(dup.values.argmax())
        raise FormatError(
            f"duplicate target_id {df['target_id'].iloc[first]}",
            filename=str(path),
            line_number=first + 2,
        )

    records = {
        target_id: AbundanceRecord(target_id=target_id, tpm=float(value))
        for target_id, value in zip(df['target_id'], tpm)
    }
    logger.info(f"Loaded {len(records)} abundance estimates from {path}")
    return records


def write_output_table(records: List[OutputRecord], output_path: Path) -> Path:
    """
    Write the final annotation table.

    The table is written to a temporary file next to output_path and
    renamed into place, so an interrupted write leaves no partial table.

    Args:
        records: OutputRecord rows in output order
        output_path: Path for output TSV

    Returns:
        Path to written file
    """
    df = pd.DataFrame([r.to_dict() for r in records], columns=OUTPUT_COLUMNS)

    output_path = Path(output_path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{output_path.name}.", dir=output_path.parent)
    os.close(fd)
    try:
        df.to_csv(tmp_name, sep='\t', index=False)
        os.replace(tmp_name, output_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info(f"Results written to {output_path} ({len(records)} rows)")
    return output_path
