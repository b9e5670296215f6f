"""Tests for venomap.utils modules."""

import pytest
from venomap.exceptions import FormatError
from venomap.utils.ids import make_orf_id, parse_orf_id, strip_frame_suffix
from venomap.utils.sequence import (
    detect_alphabet,
    reverse_complement,
    translate,
    translate_codon,
)


class TestReverseComplement:
    """Test reverse complement function."""

    def test_simple_sequence(self):
        """Test simple sequence reverse complement."""
        assert reverse_complement("ATCG") == "CGAT"

    def test_reverse_complement_is_involutive(self):
        """Test that reverse complement of reverse complement is original."""
        seq = "ATGGCCTAAGGT"
        assert reverse_complement(reverse_complement(seq)) == seq

    def test_mixed_case(self):
        """Test mixed case sequences."""
        assert reverse_complement("AtCg") == "cGaT"

    def test_ambiguous_bases_become_n(self):
        """Test that IUPAC codes other than N map to N."""
        assert reverse_complement("ARN") == "NNT"


class TestTranslate:
    """Test codon translation."""

    def test_start_and_stop(self):
        """Test that stops are kept as '*'."""
        assert translate("ATGAAATAG") == "MK*"

    def test_trailing_partial_codon_dropped(self):
        """Test that incomplete final codons are ignored."""
        assert translate("ATGAA") == "M"

    def test_offset(self):
        """Test translation from a reading offset."""
        assert translate("AATGAAA", offset=1) == "MK"

    def test_sequence_shorter_than_codon(self):
        """Test translation of a sequence with no full codon."""
        assert translate("AT") == ""
        assert translate("ATG", offset=2) == ""

    def test_negative_offset(self):
        """Test that a negative offset is rejected."""
        with pytest.raises(ValueError):
            translate("ATG", offset=-1)

    def test_rna_codon(self):
        """Test that U is read as T."""
        assert translate_codon("AUG") == "M"

    def test_ambiguous_codon(self):
        """Test that ambiguous codons translate to X."""
        assert translate_codon("ANG") == "X"

    def test_lowercase_codon(self):
        """Test lowercase codons."""
        assert translate_codon("tgg") == "W"


class TestDetectAlphabet:
    """Test alphabet detection."""

    def test_nucleotide(self):
        """Test DNA is detected."""
        assert detect_alphabet("ACGTNacgtn") == "nucleotide"

    def test_protein(self):
        """Test protein is detected."""
        assert detect_alphabet("MKVLAAGI") == "protein"


class TestOrfIds:
    """Test ORF identifier conventions."""

    def test_make_orf_id(self):
        """Test ORF id construction."""
        assert make_orf_id("A_DN1_1", 2) == "A_DN1_1_frame=2"

    def test_make_orf_id_invalid_frame(self):
        """Test frames outside 1-6 are rejected."""
        with pytest.raises(ValueError):
            make_orf_id("A_DN1_1", 7)

    def test_strip_frame_suffix(self):
        """Test only the last underscore segment is removed."""
        assert strip_frame_suffix("A_DN1_1_frame=2") == "A_DN1_1"

    def test_strip_frame_suffix_roundtrip(self):
        """Test stripping undoes make_orf_id for underscore-rich ids."""
        for frame in range(1, 7):
            assert strip_frame_suffix(make_orf_id("TRINITY_DN10_c0_g1_i1", frame)) == "TRINITY_DN10_c0_g1_i1"

    def test_strip_frame_suffix_without_underscore(self):
        """Test identifiers without a suffix segment are rejected."""
        with pytest.raises(FormatError):
            strip_frame_suffix("noseparator")

    def test_strip_frame_suffix_empty_base(self):
        """Test identifiers with nothing before the underscore are rejected."""
        with pytest.raises(FormatError):
            strip_frame_suffix("_frame=1")

    def test_parse_orf_id(self):
        """Test splitting an ORF id."""
        assert parse_orf_id("A_DN1_1_frame=5") == ("A_DN1_1", 5)

    def test_parse_orf_id_invalid(self):
        """Test malformed ORF ids."""
        with pytest.raises(FormatError):
            parse_orf_id("A_DN1_1_frame=9")
