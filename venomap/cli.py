"""
Command-line interface for VENOMAP.

VENOMAP: Venom transcriptome toxin annotation and mapping
"""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import CONFIG_TEMPLATE, PipelineConfig
from .exceptions import PipelineError

logger = logging.getLogger(__name__)

INSTALL_HINTS = {
    'classifier': "set classifier.command (or --classifier-cmd) to a tool on PATH, "
                  "or pass --classifier-table",
    'signalp': "install SignalP 6 from https://services.healthtech.dtu.dk (academic licence), "
               "or pass --signal-gff3",
    'kallisto': "conda install -c bioconda kallisto, "
                "or pass --raw-abundance and --candidate-abundance",
}


def setup_logging(verbose: bool = False, log_file: Path = None):
    """Configure console logging and an optional log file."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
    if log_file is not None:
        handler = logging.FileHandler(log_file)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        logging.getLogger().addHandler(handler)


def fail(message: str):
    """Print an error to stderr and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def cli():
    """VENOMAP: Venom transcriptome toxin annotation and mapping."""
    pass


@cli.command()
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True),
              help='YAML configuration file (CLI options override it)')
@click.option('--transcripts', '-i', type=click.Path(exists=True),
              help='Transcript FASTA (optionally gzipped)')
@click.option('--reads', '-r', type=click.Path(exists=True), multiple=True,
              help='RNA-seq FASTQ; give once for single-end, twice for paired-end')
@click.option('--output', '-o', type=click.Path(),
              help='Output directory')
@click.option('--threads', '-t', type=int,
              help='Number of threads (default: 4)')
@click.option('--classifier-cmd', type=str,
              help='Classifier command template with {input}, {output}, {threads}')
@click.option('--classifier-table', type=click.Path(exists=True),
              help='Precomputed classifier table (skips the classifier)')
@click.option('--signal-gff3', type=click.Path(exists=True),
              help='Precomputed SignalP GFF3 (skips SignalP)')
@click.option('--raw-abundance', type=click.Path(exists=True),
              help='Precomputed transcript-level abundance.tsv')
@click.option('--candidate-abundance', type=click.Path(exists=True),
              help='Precomputed candidate-level abundance.tsv')
@click.option('--signalp', 'signalp_exe', type=str, help='SignalP executable')
@click.option('--kallisto', 'kallisto_exe', type=str, help='kallisto executable')
@click.option('--keep-intermediate/--no-keep-intermediate', default=None,
              help='Keep intermediate files (default: keep)')
@click.option('--force', '-f', is_flag=True, help='Overwrite an existing result table')
@click.option('--verbose', '-v', is_flag=True, help='Verbose logging')
def run(config_path, transcripts, reads, output, threads, classifier_cmd, classifier_table,
        signal_gff3, raw_abundance, candidate_abundance, signalp_exe, kallisto_exe,
        keep_intermediate, force, verbose):
    """
    Run the full toxin annotation pipeline.

    \b
    Example:
      venomap run -i transcripts.fasta.gz -r reads_R1.fq.gz -r reads_R2.fq.gz \\
                  --classifier-cmd "toxin_classifier --fasta {input} --out {output}" \\
                  -o results/

    \b
    Example with a configuration file:
      venomap run --config venomap.yaml
    """
    from .pipeline import AnnotationPipeline

    # Build configuration: file first, then CLI overrides
    try:
        if config_path:
            config = PipelineConfig.from_yaml(Path(config_path))
        elif transcripts:
            config = PipelineConfig(transcripts=Path(transcripts), output_dir=Path(output or './results'))
        else:
            fail("Either --config or --transcripts must be provided")
    except PipelineError as e:
        fail(str(e))

    if transcripts:
        config.transcripts = Path(transcripts)
    if reads:
        config.reads = [Path(r) for r in reads]
    if output:
        config.output_dir = Path(output)
    if threads is not None:
        config.threads = threads
    if classifier_cmd:
        config.classifier.command = classifier_cmd
    if classifier_table:
        config.classifier_table = Path(classifier_table)
    if signal_gff3:
        config.signal_gff3 = Path(signal_gff3)
    if raw_abundance:
        config.raw_abundance = Path(raw_abundance)
    if candidate_abundance:
        config.candidate_abundance = Path(candidate_abundance)
    if signalp_exe:
        config.signalp.executable = signalp_exe
    if kallisto_exe:
        config.kallisto.executable = kallisto_exe
    if keep_intermediate is not None:
        config.keep_intermediate = keep_intermediate
    config.force = config.force or force
    config.verbose = config.verbose or verbose

    try:
        config.validate()
    except PipelineError as e:
        fail(str(e))

    config.output_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(config.verbose, config.log_file)

    click.echo("\nRunning pipeline...")
    try:
        records = AnnotationPipeline(config).run()
    except PipelineError as e:
        logger.error(str(e))
        fail(str(e))

    click.echo("\nPipeline complete!")
    click.echo(f"Annotated {len(records)} toxin candidates")
    click.echo(f"Results written to: {config.output_table}")


@cli.command()
@click.argument('transcripts', type=click.Path(exists=True))
@click.option('--output', '-o', type=click.Path(), required=True,
              help='Output protein FASTA')
@click.option('--verbose', '-v', is_flag=True, help='Verbose logging')
def translate(transcripts, output, verbose):
    """Translate transcripts in all six reading frames."""
    from .core.orf import write_six_frame_fasta
    from .io.fasta import SequenceStore
    from .pipeline import check_transcript_alphabet

    setup_logging(verbose)
    try:
        with SequenceStore(transcripts) as store:
            check_transcript_alphabet(store)
            write_six_frame_fasta(store, Path(output))
            n_transcripts = len(store)
    except PipelineError as e:
        fail(str(e))

    click.echo(f"Wrote {n_transcripts * 6} frame translations to {output}")


@cli.command()
@click.argument('orfs', type=click.Path(exists=True))
@click.argument('classifier_table', type=click.Path(exists=True))
@click.option('--output', '-o', type=click.Path(), required=True,
              help='Output FASTA of extended candidate proteins')
@click.option('--transcripts', '-i', type=click.Path(exists=True),
              help='Transcript FASTA; also write candidate DNA to --dna-output')
@click.option('--dna-output', type=click.Path(),
              help='Output FASTA of candidate DNA regions (requires --transcripts)')
@click.option('--verbose', '-v', is_flag=True, help='Verbose logging')
def extend(orfs, classifier_table, output, transcripts, dna_output, verbose):
    """Extend classifier matches to start/stop boundaries."""
    from .core.extension import extend_matches
    from .core.mapping import map_region_to_dna
    from .io.fasta import SequenceStore, write_fasta
    from .io.tables import read_classifier_table
    from .pipeline import write_region_fasta

    if dna_output and not transcripts:
        fail("--dna-output requires --transcripts")

    setup_logging(verbose)
    try:
        matches = read_classifier_table(Path(classifier_table))
        with SequenceStore(orfs) as orf_store:
            regions = extend_matches(matches, orf_store)
            write_region_fasta(regions, Path(output), 'protein')

            if dna_output:
                with SequenceStore(output) as region_store, SequenceStore(transcripts) as dna_store:
                    write_fasta(
                        ((rid, map_region_to_dna(rid, orf_store, region_store, dna_store))
                         for rid in region_store.ids()),
                        Path(dna_output),
                    )
    except PipelineError as e:
        fail(str(e))

    click.echo(f"Extended {len(regions)} classifier matches; proteins written to {output}")
    if dna_output:
        click.echo(f"Candidate DNA written to {dna_output}")


@cli.command()
@click.argument('raw_abundance', type=click.Path(exists=True))
@click.argument('candidate_abundance', type=click.Path(exists=True))
@click.argument('annotated_fasta', type=click.Path(exists=True))
@click.option('--output', '-o', type=click.Path(), required=True,
              help='Output TSV file')
@click.option('--verbose', '-v', is_flag=True, help='Verbose logging')
def merge(raw_abundance, candidate_abundance, annotated_fasta, output, verbose):
    """
    Merge two abundance passes with annotated candidates.

    RAW_ABUNDANCE is keyed by transcript id, CANDIDATE_ABUNDANCE by
    candidate (ORF) id; ANNOTATED_FASTA headers carry FAM= tags.
    """
    from .core.merge import merge_annotations, parse_signal
    from .io.fasta import SequenceStore
    from .io.tables import read_abundance_table, write_output_table

    setup_logging(verbose)
    try:
        raw = read_abundance_table(Path(raw_abundance))
        candidates = read_abundance_table(Path(candidate_abundance))
        with SequenceStore(annotated_fasta) as store:
            records = merge_annotations(raw, candidates, store)
            n_signal = sum(1 for rid in candidates if parse_signal(store.header(rid)))
        write_output_table(records, Path(output))
    except PipelineError as e:
        fail(str(e))

    click.echo(f"Merged {len(records)} candidates ({n_signal} with signal peptides)")
    click.echo(f"Results written to: {output}")


@cli.command('check-tools')
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True),
              help='YAML configuration file with tool settings')
def check_tools(config_path):
    """Report availability of the classifier, SignalP and kallisto."""
    from .config import ClassifierConfig, KallistoConfig, SignalPConfig
    from .integrations import ClassifierRunner, KallistoRunner, SignalPeptideRunner
    from .integrations.kallisto import version_string

    classifier_cfg, signalp_cfg, kallisto_cfg = ClassifierConfig(), SignalPConfig(), KallistoConfig()
    if config_path:
        try:
            config = PipelineConfig.from_yaml(Path(config_path))
        except PipelineError as e:
            fail(str(e))
        classifier_cfg, signalp_cfg, kallisto_cfg = config.classifier, config.signalp, config.kallisto

    missing = []

    classifier = ClassifierRunner(classifier_cfg.command)
    if classifier.is_available():
        click.echo(f"classifier: {classifier.executable} found")
    else:
        missing.append('classifier')
        click.echo(f"classifier: {'not configured' if not classifier.command else classifier.executable + ' not found'}")

    signalp = SignalPeptideRunner(executable=signalp_cfg.executable)
    if signalp.is_available():
        click.echo(f"signalp: {signalp.executable} found")
    else:
        missing.append('signalp')
        click.echo(f"signalp: {signalp.executable} not found")

    kallisto = KallistoRunner(executable=kallisto_cfg.executable, min_version=kallisto_cfg.min_version)
    problems = kallisto.check_version()
    if problems:
        missing.append('kallisto')
        for problem in problems:
            click.echo(f"kallisto: {problem}")
    else:
        click.echo(f"kallisto: version {version_string(kallisto.version)}")

    if missing:
        click.echo(f"\n{len(missing)} tool(s) unavailable; provide precomputed outputs for those stages.")
        for tool in missing:
            click.echo(f"  {tool}: {INSTALL_HINTS[tool]}")
        sys.exit(1)


@cli.command()
@click.option('--output', '-o', type=click.Path(), default='venomap_config.yaml',
              help='Output config file path')
def init(output):
    """Generate a template configuration file."""
    with open(output, 'w') as f:
        f.write(CONFIG_TEMPLATE)

    click.echo(f"Generated configuration template: {output}")
    click.echo("\nEdit this file and run:")
    click.echo(f"  venomap run --config {output}")


def main():
    cli()


if __name__ == '__main__':
    main()
