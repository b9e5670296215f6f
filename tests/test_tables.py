"""Tests for venomap.io.tables module."""

import pandas as pd
import pytest
from venomap.core.models import OutputRecord
from venomap.exceptions import FormatError, PipelineIOError
from venomap.io.tables import (
    OUTPUT_COLUMNS,
    read_abundance_table,
    read_classifier_table,
    write_output_table,
)


CLASSIFIER_HEADER = "id\tfamily\tscore\ttarget_region\tevalue\tfamily_description\n"
ABUNDANCE_HEADER = "target_id\tlength\teff_length\test_counts\ttpm\n"


class TestReadClassifierTable:
    """Test classifier table parsing."""

    def test_columns_by_position(self, tmp_path):
        """Test id/family/region/description come from columns 0/1/3/5."""
        path = tmp_path / "classifier.tsv"
        path.write_text(
            CLASSIFIER_HEADER
            + "A_DN1_1_frame=1\tPLA2\t120.5\tKRW\t1e-30\tPhospholipase A2\n"
            + "B_DN2_1_frame=4\t3FTx\t88.0\tCYTK\t1e-12\tThree-finger toxin\n"
        )
        matches = read_classifier_table(path)
        assert len(matches) == 2
        assert matches[0].orf_id == "A_DN1_1_frame=1"
        assert matches[0].family == "PLA2"
        assert matches[0].target_region == "KRW"
        assert matches[0].description == "Phospholipase A2"
        assert matches[1].family == "3FTx"

    def test_numeric_looking_values_kept_as_text(self, tmp_path):
        """Test family labels are not converted to numbers."""
        path = tmp_path / "classifier.tsv"
        path.write_text(CLASSIFIER_HEADER + "A_1_frame=1\t001\t1\tKRW\t1\tNA\n")
        match = read_classifier_table(path)[0]
        assert match.family == "001"
        assert match.description == "NA"

    def test_duplicate_hits_keep_first(self, tmp_path):
        """Test only the first hit per ORF is used."""
        path = tmp_path / "classifier.tsv"
        path.write_text(
            CLASSIFIER_HEADER
            + "A_1_frame=1\tPLA2\t1\tKRW\t1\tfirst\n"
            + "A_1_frame=1\tSVMP\t1\tQQQ\t1\tsecond\n"
        )
        matches = read_classifier_table(path)
        assert [m.family for m in matches] == ["PLA2"]

    def test_header_only(self, tmp_path):
        """Test a table with no hits."""
        path = tmp_path / "classifier.tsv"
        path.write_text(CLASSIFIER_HEADER)
        assert read_classifier_table(path) == []

    def test_too_few_columns(self, tmp_path):
        """Test tables narrower than six columns are rejected."""
        path = tmp_path / "classifier.tsv"
        path.write_text("id\tfamily\tscore\ttarget_region\nA_1_frame=1\tPLA2\t1\tKRW\n")
        with pytest.raises(FormatError):
            read_classifier_table(path)

    def test_missing_region(self, tmp_path):
        """Test a hit without a target region is rejected with its line number."""
        path = tmp_path / "classifier.tsv"
        path.write_text(CLASSIFIER_HEADER + "A_1_frame=1\tPLA2\t1\t\t1\tdesc\n")
        with pytest.raises(FormatError) as exc_info:
            read_classifier_table(path)
        assert exc_info.value.line_number == 2

    def test_empty_file(self, tmp_path):
        """Test an empty file raises FormatError."""
        path = tmp_path / "classifier.tsv"
        path.write_text("")
        with pytest.raises(FormatError):
            read_classifier_table(path)

    def test_missing_file(self, tmp_path):
        """Test a missing file raises PipelineIOError."""
        with pytest.raises(PipelineIOError):
            read_classifier_table(tmp_path / "missing.tsv")


class TestReadAbundanceTable:
    """Test abundance table parsing."""

    def test_kallisto_table(self, tmp_path):
        """Test target_id/tpm are read in file order."""
        path = tmp_path / "abundance.tsv"
        path.write_text(
            ABUNDANCE_HEADER
            + "B_DN2_1\t600\t420.5\t10\t3.25\n"
            + "A_DN1_1\t1200\t1020.5\t250\t120.75\n"
        )
        records = read_abundance_table(path)
        assert list(records) == ["B_DN2_1", "A_DN1_1"]
        assert records["A_DN1_1"].tpm == 120.75
        assert records["B_DN2_1"].target_id == "B_DN2_1"

    def test_only_required_columns(self, tmp_path):
        """Test extra columns are optional."""
        path = tmp_path / "abundance.tsv"
        path.write_text("target_id\ttpm\nA_1\t0\n")
        assert read_abundance_table(path)["A_1"].tpm == 0.0

    def test_missing_tpm_column(self, tmp_path):
        """Test tables without tpm are rejected."""
        path = tmp_path / "abundance.tsv"
        path.write_text("target_id\test_counts\nA_1\t5\n")
        with pytest.raises(FormatError, match="tpm"):
            read_abundance_table(path)

    def test_non_numeric_tpm(self, tmp_path):
        """Test a non-numeric tpm is reported with its line number."""
        path = tmp_path / "abundance.tsv"
        path.write_text("target_id\ttpm\nA_1\t1.5\nB_1\tlots\n")
        with pytest.raises(FormatError) as exc_info:
            read_abundance_table(path)
        assert exc_info.value.line_number == 3

    def test_duplicate_target_id(self, tmp_path):
        """Test repeated target ids are rejected."""
        path = tmp_path / "abundance.tsv"
        path.write_text("target_id\ttpm\nA_1\t1.5\nA_1\t2.0\n")
        with pytest.raises(FormatError, match="duplicate"):
            read_abundance_table(path)


class TestWriteOutputTable:
    """Test final table output."""

    def test_write_and_read_back(self, tmp_path):
        """Test header and row content of the output table."""
        records = [
            OutputRecord("A_DN1_1", "PLA2", 10.5, 42.0, "MKRW"),
            OutputRecord("B_DN2_1", "3FTx", 1.0, 0.0, "MCYT"),
        ]
        output = write_output_table(records, tmp_path / "toxins.tsv")

        df = pd.read_csv(output, sep='\t')
        assert list(df.columns) == OUTPUT_COLUMNS
        assert df['sequence_id'].tolist() == ["A_DN1_1", "B_DN2_1"]
        assert df['raw_tpm'].tolist() == [10.5, 1.0]
        assert df['transcripts_tpm'].tolist() == [42.0, 0.0]

    def test_no_temporary_files_left(self, tmp_path):
        """Test the atomic write leaves only the final table."""
        write_output_table([OutputRecord("A_1", "PLA2", 1.0, 2.0, "MK")], tmp_path / "toxins.tsv")
        assert [p.name for p in tmp_path.iterdir()] == ["toxins.tsv"]

    def test_empty_table_has_header(self, tmp_path):
        """Test zero rows still writes the header."""
        output = write_output_table([], tmp_path / "toxins.tsv")
        assert output.read_text().splitlines() == ['\t'.join(OUTPUT_COLUMNS)]
