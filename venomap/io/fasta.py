"""
Indexed FASTA access and FASTA writing.

SequenceStore keeps only headers in memory; sequences are fetched on
demand through an htslib faidx index (pysam.FastaFile).
"""

import gzip
import logging
import shutil
import tempfile
import zlib
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, TextIO, Tuple, Union

import pysam

from ..exceptions import RecordNotFoundError, PipelineIOError

logger = logging.getLogger(__name__)

GZIP_MAGIC = b'\x1f\x8b'
LINE_WIDTH = 80


def is_gzipped(path: Path) -> bool:
    """Check the gzip magic bytes of a file."""
    try:
        with open(path, 'rb') as f:
            return f.read(2) == GZIP_MAGIC
    except OSError as e:
        raise PipelineIOError(str(e), filename=str(path)) from e


def decompress_gzip(path: Path, output_path: Path) -> Path:
    """
    Decompress a gzip file to output_path.

    Raises:
        PipelineIOError: If the gzip stream is corrupt or truncated
    """
    try:
        with gzip.open(path, 'rb') as src, open(output_path, 'wb') as dst:
            shutil.copyfileobj(src, dst)
    except (OSError, EOFError, zlib.error) as e:
        raise PipelineIOError(f"corrupt gzip stream ({e})", filename=str(path)) from e
    return output_path


class SequenceStore:
    """
    Random-access lookup of FASTA records by identifier.

    The identifier is the first whitespace-delimited token of the header
    line; ``header(id)`` returns the full header line without '>'.

    Args:
        path: FASTA file, optionally gzip-compressed
        work_dir: Directory for the decompressed copy and the .fai index.
            A temporary directory owned by the store is used if omitted.
    """

    def __init__(self, path: Union[str, Path], work_dir: Optional[Path] = None):
        self.path = Path(path)
        self._owned_dir = None
        if work_dir is None:
            self._owned_dir = Path(tempfile.mkdtemp(prefix='venomap_store_'))
            work_dir = self._owned_dir
        self.work_dir = Path(work_dir)
        self.work_dir.mkdir(parents=True, exist_ok=True)

        if not self.path.is_file():
            raise PipelineIOError("file does not exist", filename=str(self.path))

        self.fasta_path = self._prepare_input()
        self._headers: Dict[str, str] = {}
        self._empty: Set[str] = set()
        self._fasta = None
        self._build_index()

    def _prepare_input(self) -> Path:
        """Decompress gzip input into the work directory."""
        if not is_gzipped(self.path):
            return self.path

        name = self.path.name
        if name.endswith('.gz'):
            name = name[:-3]
        output_path = self.work_dir / name
        logger.info(f"Decompressing {self.path} to {output_path}")
        return decompress_gzip(self.path, output_path)

    def _build_index(self):
        """Read every header once and open the faidx index."""
        try:
            with pysam.FastxFile(str(self.fasta_path)) as fastx:
                for entry in fastx:
                    header = entry.name
                    if entry.comment:
                        header = f"{entry.name} {entry.comment}"
                    if entry.name in self._headers:
                        logger.warning(f"Duplicate id {entry.name} in {self.path}; keeping first record")
                        continue
                    self._headers[entry.name] = header
                    if not entry.sequence:
                        self._empty.add(entry.name)
        except (OSError, ValueError) as e:
            raise PipelineIOError(str(e), filename=str(self.path)) from e

        if not self._headers:
            logger.warning(f"No sequences found in {self.path}")
            return

        # always rebuilt, work dirs are reused across runs
        index_path = self.work_dir / f"{self.fasta_path.name}.fai"
        try:
            pysam.faidx(str(self.fasta_path), '--fai-idx', str(index_path))
            self._fasta = pysam.FastaFile(str(self.fasta_path), filepath_index=str(index_path))
        except (OSError, ValueError, pysam.utils.SamtoolsError) as e:
            raise PipelineIOError(f"cannot index FASTA ({e})", filename=str(self.path)) from e

        logger.debug(f"Indexed {len(self._headers)} sequences from {self.path}")

    def header(self, record_id: str) -> str:
        """Return the full header line for record_id."""
        try:
            return self._headers[record_id]
        except KeyError:
            raise RecordNotFoundError(record_id, source=str(self.path)) from None

    def sequence(self, record_id: str) -> str:
        """Return the sequence for record_id."""
        if record_id not in self._headers:
            raise RecordNotFoundError(record_id, source=str(self.path))
        if record_id in self._empty:
            return ""
        try:
            return self._fasta.fetch(reference=record_id)
        except (OSError, ValueError, KeyError) as e:
            raise PipelineIOError(f"cannot fetch {record_id} ({e})", filename=str(self.path)) from e

    def all_ids(self) -> Set[str]:
        """Return the set of record identifiers."""
        return set(self._headers)

    def ids(self) -> List[str]:
        """Return record identifiers in file order."""
        return list(self._headers)

    def items(self) -> Iterable[Tuple[str, str]]:
        """Iterate (id, sequence) pairs in file order."""
        for record_id in self._headers:
            yield record_id, self.sequence(record_id)

    def close(self):
        """Close the index and remove any temporary files owned by the store."""
        if self._fasta is not None:
            self._fasta.close()
            self._fasta = None
        if self._owned_dir is not None:
            shutil.rmtree(self._owned_dir, ignore_errors=True)
            self._owned_dir = None

    def __contains__(self, record_id: str) -> bool:
        return record_id in self._headers

    def __len__(self) -> int:
        return len(self._headers)

    def __enter__(self) -> 'SequenceStore':
        return self

    def __exit__(self, exc_type, exc_value, tb):
        self.close()

    def __repr__(self) -> str:
        return f"SequenceStore(path={self.path}, records={len(self._headers)})"


def write_fasta_record(handle: TextIO, header: str, sequence: str):
    """Write one FASTA record with wrapped sequence lines."""
    handle.write(f">{header}\n")
    for i in range(0, len(sequence), LINE_WIDTH):
        handle.write(sequence[i:i + LINE_WIDTH] + "\n")


def write_fasta(records: Iterable[Tuple[str, str]], output_path: Path) -> Path:
    """
    Write (header, sequence) pairs to a FASTA file.

    Args:
        records: Iterable of (header, sequence) tuples
        output_path: Path for output FASTA

    Returns:
        Path to created FASTA file
    """
    with open(output_path, 'w') as f:
        for header, sequence in records:
            write_fasta_record(f, header, sequence)

    return output_path
