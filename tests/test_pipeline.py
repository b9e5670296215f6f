"""End-to-end tests for venomap.pipeline using precomputed tool outputs."""

import pandas as pd
import pytest
from venomap.config import PipelineConfig
from venomap.core.models import ExtendedRegion
from venomap.exceptions import ConfigurationError, ConsistencyError, FormatError
from venomap.io.fasta import SequenceStore
from venomap.pipeline import AnnotationPipeline, apply_signal_flags, check_transcript_alphabet


# frame 1 of A_DN1_1 reads "*MKRW*"
TRANSCRIPTS = (
    ">A_DN1_1 len=20\n"
    "TAAATGAAACGTTGGTAAGG\n"
    ">B_DN2_1 len=12\n"
    "GGGCCCAAATTT\n"
)

CLASSIFIER_TABLE = (
    "id\tfamily\tscore\ttarget_region\tevalue\tfamily_description\n"
    "A_DN1_1_frame=1\tPLA2\t120.5\tKRW\t1e-30\tPhospholipase A2\n"
)

SIGNAL_GFF3 = (
    "## gff-version 3\n"
    "A_DN1_1_frame=1\tSignalP-6.0\tsignal_peptide\t1\t3\t0.91\t.\t.\t.\n"
)

RAW_ABUNDANCE = (
    "target_id\tlength\teff_length\test_counts\ttpm\n"
    "A_DN1_1\t20\t5\t100\t10.5\n"
    "B_DN2_1\t12\t3\t2\t3.0\n"
)

CANDIDATE_ABUNDANCE = (
    "target_id\tlength\teff_length\test_counts\ttpm\n"
    "A_DN1_1_frame=1\t12\t4\t90\t42.0\n"
)


def make_config(tmp_path, classifier_table=CLASSIFIER_TABLE, raw_abundance=RAW_ABUNDANCE,
                transcripts=TRANSCRIPTS, **kwargs):
    inputs = tmp_path / "inputs"
    inputs.mkdir(exist_ok=True)
    files = {
        'transcripts.fasta': transcripts,
        'classifier.tsv': classifier_table,
        'output.gff3': SIGNAL_GFF3,
        'raw_abundance.tsv': raw_abundance,
        'candidate_abundance.tsv': CANDIDATE_ABUNDANCE,
    }
    for name, text in files.items():
        (inputs / name).write_text(text)

    return PipelineConfig(
        transcripts=inputs / "transcripts.fasta",
        output_dir=tmp_path / "results",
        classifier_table=inputs / "classifier.tsv",
        signal_gff3=inputs / "output.gff3",
        raw_abundance=inputs / "raw_abundance.tsv",
        candidate_abundance=inputs / "candidate_abundance.tsv",
        **kwargs,
    ).validate()


class TestAnnotationPipeline:
    """Test a full run with every collaborator precomputed."""

    def test_full_run(self, tmp_path):
        """Test the result table for a single toxin candidate."""
        config = make_config(tmp_path)
        records = AnnotationPipeline(config).run()

        assert len(records) == 1
        record = records[0]
        assert record.sequence_id == "A_DN1_1"
        assert record.family == "PLA2"
        assert record.raw_tpm == 10.5
        assert record.transcripts_tpm == 42.0
        assert record.sequence == "MKRW"

        df = pd.read_csv(config.output_table, sep='\t')
        assert df['sequence_id'].tolist() == ["A_DN1_1"]
        assert df['sequence'].tolist() == ["MKRW"]

    def test_intermediate_files(self, tmp_path):
        """Test the candidate FASTA files carry DNA and annotation headers."""
        config = make_config(tmp_path)
        AnnotationPipeline(config).run()
        work = config.intermediate_dir

        with SequenceStore(work / "candidates.fna") as dna:
            assert dna.ids() == ["A_DN1_1_frame=1"]
            assert dna.header("A_DN1_1_frame=1") == "A_DN1_1_frame=1"
            assert dna.sequence("A_DN1_1_frame=1") == "ATGAAACGTTGG"

        with SequenceStore(work / "candidates.annotated.faa") as annotated:
            assert annotated.header("A_DN1_1_frame=1") == (
                "A_DN1_1_frame=1 FAM=PLA2 FAMDESC=Phospholipase A2 SIG=YES"
            )

        assert (config.output_dir / "run_config.yaml").exists()

    def test_no_intermediate_kept(self, tmp_path):
        """Test intermediate files are removed on request."""
        config = make_config(tmp_path, keep_intermediate=False)
        AnnotationPipeline(config).run()
        assert config.output_table.exists()
        assert not config.intermediate_dir.exists()

    def test_no_classifier_hits(self, tmp_path):
        """Test an empty classifier table yields an empty result table."""
        header_only = CLASSIFIER_TABLE.splitlines(keepends=True)[0]
        config = make_config(tmp_path, classifier_table=header_only)
        assert AnnotationPipeline(config).run() == []
        assert pd.read_csv(config.output_table, sep='\t').empty

    def test_refuses_to_overwrite(self, tmp_path):
        """Test an existing result table needs force."""
        config = make_config(tmp_path)
        AnnotationPipeline(config).run()
        with pytest.raises(ConfigurationError, match="force"):
            AnnotationPipeline(config).run()

        config.force = True
        assert len(AnnotationPipeline(config).run()) == 1

    def test_missing_raw_abundance(self, tmp_path):
        """Test a candidate whose transcript is not in pass 1 aborts the run."""
        raw = RAW_ABUNDANCE.splitlines(keepends=True)
        config = make_config(tmp_path, raw_abundance=raw[0] + raw[2])
        with pytest.raises(ConsistencyError):
            AnnotationPipeline(config).run()
        assert not config.output_table.exists()

    def test_protein_input_rejected(self, tmp_path):
        """Test amino-acid transcripts are rejected before translation."""
        config = make_config(tmp_path, transcripts=">p1\nMKVLAAGIWW\n")
        with pytest.raises(FormatError, match="nucleotide"):
            AnnotationPipeline(config).run()


class TestPipelineHelpers:
    """Test stage helpers."""

    def test_apply_signal_flags(self):
        """Test regions absent from the predictor output are flagged NO."""
        regions = [ExtendedRegion("a_frame=1", "MK"), ExtendedRegion("b_frame=2", "MQ")]
        apply_signal_flags(regions, ["a_frame=1"])
        assert [r.signal_peptide for r in regions] == [True, False]
        assert regions[1].header().endswith("SIG=NO")

    def test_check_transcript_alphabet(self, tmp_path):
        """Test DNA input passes the alphabet check."""
        path = tmp_path / "t.fasta"
        path.write_text(TRANSCRIPTS)
        with SequenceStore(path) as store:
            check_transcript_alphabet(store)
