"""
SSPred Command Line Interface.

This module provides a CLI for predicting protein secondary structure,
training GOR models, converting DSSP files, and benchmarking predictors.
Built with Click for a user-friendly experience with proper help
documentation.

Usage:
    sspred predict sequence.fasta
    sspred predict --seq MVLSEGEWQLVLHVWAKVEAD --method ImprovedChouFasman
    sspred predict --pssm 1abc.pssm --method GOR --model gor_model.json
    sspred train --ids train.txt --pssm-dir pssm/ --dssp-dir dssp/
    sspred dssp2hec 1abc.dssp
    sspred benchmark benchmark.txt --model gor_model.json
    sspred list-predictors
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .. import __version__
from ..core.exceptions import SSPredError

# Initialize rich console for pretty output
console = Console()
err_console = Console(stderr=True)

# Colour of each class in terminal output
CLASS_STYLES = {"H": "bold red", "E": "bold yellow", "C": "cyan"}


def print_banner():
    """Print the SSPred banner."""
    banner = f"""
    ╔═══════════════════════════════════════════════════════════════╗
    ║                         SSPred v{__version__}                         ║
    ║       Three-State Protein Secondary Structure Prediction      ║
    ╚═══════════════════════════════════════════════════════════════╝
    """
    err_console.print(banner, style="bold blue")


def colorize(structure: str) -> str:
    """Rich markup colouring each H/E/C label."""
    return "".join(
        f"[{CLASS_STYLES.get(label, 'white')}]{label}[/]" for label in structure
    )


def fail(message: str):
    console.print(f"[red]✗ {escape(message)}[/red]")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="SSPred")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool):
    """
    SSPred: three-state (H/E/C) protein secondary-structure prediction.

    This tool provides:

    \b
    • Classical Chou-Fasman region prediction
    • Wavelet-nucleated (improved) Chou-Fasman prediction
    • GOR statistical prediction with trainable models
    • Q3 benchmarking against observed structure

    Run 'sspred COMMAND --help' for command-specific help.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if not quiet:
        print_banner()


@cli.command("predict")
@click.argument("input_file", type=click.Path(exists=True), required=False)
@click.option("--seq", "-s", "sequence", help="Sequence given directly on the command line")
@click.option(
    "--pssm",
    type=click.Path(exists=True),
    help="PSI-BLAST ASCII PSSM profile (GOR only)",
)
@click.option(
    "--method", "-m",
    default="ChouFasman",
    show_default=True,
    help="Prediction method (see list-predictors)",
)
@click.option(
    "--model",
    type=click.Path(exists=True),
    help="Trained GOR model JSON (required for GOR)",
)
@click.option(
    "--format", "-f", "output_format",
    type=click.Choice(["text", "json", "tsv"]),
    default="text",
    help="Output format",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Output file (json) or directory (tsv); json defaults to stdout",
)
@click.option("--cache", is_flag=True, help="Cache predictions on disk")
@click.pass_context
def predict(
    ctx,
    input_file: Optional[str],
    sequence: Optional[str],
    pssm: Optional[str],
    method: str,
    model: Optional[str],
    output_format: str,
    output: Optional[str],
    cache: bool,
):
    """
    Predict the secondary structure of protein sequences.

    INPUT_FILE is a FASTA file (one or more records) or a plain text file
    holding a single sequence.

    \b
    Examples:
        sspred predict proteins.fasta
        sspred predict --seq MVLSEGEWQLVLHVWAKVEAD -m ImprovedChouFasman
        sspred predict query.fasta -m GOR --model gor_model.json -f json
        sspred predict --pssm 1abc.pssm -m GOR --model gor_model.json
    """
    from ..core.formats import parse_pssm
    from ..core.models import ProteinRecord
    from ..core.sequence import parse_fasta, read_sequence_file
    from ..predictors.base import PredictorConfig, get_predictor
    from ..predictors.export import export_batch_results, result_to_dict

    sources = [s for s in (input_file, sequence, pssm) if s]
    if len(sources) != 1:
        fail("Provide exactly one of INPUT_FILE, --seq or --pssm")

    kwargs = {"model_path": model} if model else {}
    try:
        predictor = get_predictor(method, PredictorConfig(use_cache=cache), **kwargs)

        if pssm:
            if not hasattr(predictor, "predict_profile"):
                fail(f"{predictor.name} does not accept profiles; use --method GOR")
            if not getattr(predictor, "is_trained", False):
                fail(f"{predictor.name} needs a trained model (--model)")
            results = [predictor.predict_profile(parse_pssm(pssm), sequence_id=Path(pssm).stem)]
        else:
            if sequence:
                proteins = [ProteinRecord(id="query", sequence=sequence)]
            elif Path(input_file).read_text().lstrip().startswith(">"):
                proteins = list(parse_fasta(Path(input_file)))
            else:
                proteins = [
                    ProteinRecord(id=Path(input_file).stem, sequence=read_sequence_file(input_file))
                ]

            if getattr(predictor, "is_trained", True) is False:
                fail(f"{predictor.name} needs a trained model (--model)")

            results = predictor.predict_batch(proteins)
    except (SSPredError, ValueError) as e:
        fail(str(e))

    if output_format == "json":
        payload = json.dumps([result_to_dict(r) for r in results], indent=2)
        if output:
            Path(output).write_text(payload)
            console.print(f"[green]✓[/green] Results saved to: {output}")
        else:
            click.echo(payload)
        return

    if output_format == "tsv":
        output_dir = Path(output or "sspred_results")
        export_batch_results(results, output_dir)
        console.print(f"[green]✓[/green] Results saved to: {output_dir}")
        return

    for result in results:
        composition = result.composition()
        console.print(f"\n[bold]{result.sequence_id}[/bold] ({len(result.sequence)} residues, {result.predictor_name})")
        console.print(result.sequence, soft_wrap=True)
        console.print(colorize(result.structure), soft_wrap=True)
        console.print(
            f"[dim]H {composition['H']:.1%}  E {composition['E']:.1%}  C {composition['C']:.1%}[/dim]"
        )

    if ctx.obj.get("verbose"):
        for result in results:
            table = Table(title=f"Regions: {result.sequence_id}", show_header=True, header_style="bold")
            table.add_column("Class")
            table.add_column("Start", justify="right")
            table.add_column("End", justify="right")
            table.add_column("Residues")
            table.add_column("Score", justify="right")
            for label, regions in (("H", result.helix_regions), ("E", result.strand_regions)):
                for region in regions:
                    table.add_row(
                        label,
                        str(region.start + 1),
                        str(region.end),
                        result.region_sequence(region),
                        f"{region.score:.3f}" if region.score is not None else "-",
                    )
            console.print(table)


@cli.command("train")
@click.option("--ids", "id_list", required=True, type=click.Path(exists=True), help="File with one protein id per line")
@click.option("--pssm-dir", required=True, type=click.Path(exists=True, file_okay=False), help="Directory of <id>.pssm files")
@click.option("--dssp-dir", required=True, type=click.Path(exists=True, file_okay=False), help="Directory of <id>.dssp label files")
@click.option("--window", "-w", type=int, default=17, show_default=True, help="Odd window size")
@click.option("--out", "-o", type=click.Path(), default="gor_model.json", show_default=True, help="Output model file")
def train(id_list: str, pssm_dir: str, dssp_dir: str, window: int, out: str):
    """
    Train a GOR model from PSSM profiles and structure labels.

    Any unreadable or malformed example aborts training; profiles with no
    mass are skipped.

    \b
    Example:
        sspred train --ids train.txt --pssm-dir pssm/ --dssp-dir dssp/ -w 17
    """
    from ..predictors.gor import train_from_directory

    try:
        with console.status("Training GOR model..."):
            model = train_from_directory(id_list, pssm_dir, dssp_dir, window)
        model.save(out)
    except SSPredError as e:
        fail(f"Training failed: {e}")

    console.print(f"[green]✓[/green] GOR model saved to {out}")


@cli.command("dssp2hec")
@click.argument("dssp_file", type=click.Path(exists=True))
def dssp2hec(dssp_file: str):
    """
    Reduce a DSSP file to a three-state H/E/C string.

    {H, G, I} become H, {E, B} become E, everything else C.
    """
    from ..core.formats import parse_dssp

    try:
        hec = parse_dssp(dssp_file)
    except SSPredError as e:
        fail(str(e))

    click.echo(hec)


@cli.command("benchmark")
@click.argument("dataset_file", type=click.Path(exists=True))
@click.option(
    "--method", "-m",
    multiple=True,
    help="Method(s) to benchmark (default: ChouFasman, ImprovedChouFasman, and GOR when --model is given)",
)
@click.option("--model", type=click.Path(exists=True), help="Trained GOR model JSON")
@click.option("--output", "-o", type=click.Path(), help="Write per-protein scores to this TSV file")
def benchmark(dataset_file: str, method: tuple, model: Optional[str], output: Optional[str]):
    """
    Benchmark methods against proteins of known structure.

    DATASET_FILE holds name/sequence/structure triples or sequence/structure
    pairs, one per line. Positions observed as X are not scored.

    \b
    Examples:
        sspred benchmark benchmark.txt
        sspred benchmark benchmark.txt -m GOR --model gor_model.json -o q3.tsv
    """
    from ..benchmark import BenchmarkRunner, read_benchmark_file, results_to_frame

    methods = list(method) or ["ChouFasman", "ImprovedChouFasman"] + (["GOR"] if model else [])

    try:
        records = read_benchmark_file(dataset_file)

        runner = BenchmarkRunner()
        for name in methods:
            kwargs = {"model_path": model} if model and name.lower() == "gor" else {}
            runner.add_predictor(name, **kwargs)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("Benchmarking", total=len(records) * len(methods))
            results = runner.run(
                records,
                dataset_name=Path(dataset_file).stem,
                progress_callback=lambda i, n, name: progress.update(
                    task, advance=1, description=f"Benchmarking {name}"
                ),
            )
    except (SSPredError, ValueError) as e:
        fail(str(e))

    frame = results_to_frame(results)

    table = Table(title="Q3 per protein", show_header=True, header_style="bold cyan")
    table.add_column("Protein", style="bold")
    for result in results:
        table.add_column(result.predictor_name, justify="right")
    if not frame.empty:
        pivot = frame.pivot_table(index="id", columns="predictor", values="q3", sort=False)
        for protein_id, row in pivot.iterrows():
            table.add_row(str(protein_id), *(f"{row[r.predictor_name]:.3f}" for r in results))
    console.print(table)

    summary = Table(title="Summary", show_header=True, header_style="bold")
    summary.add_column("Method", style="bold")
    summary.add_column("Mean Q3", justify="right")
    summary.add_column("Pooled Q3", justify="right")
    summary.add_column("MCC H", justify="right")
    summary.add_column("MCC E", justify="right")
    summary.add_column("SOV H", justify="right")
    summary.add_column("SOV E", justify="right")
    for result in sorted(results, key=lambda r: r.mean_q3, reverse=True):
        per_class = result.overall.per_class
        summary.add_row(
            result.predictor_name,
            f"{result.mean_q3:.3f}",
            f"{result.overall.q3:.3f}",
            f"{per_class['H'].mcc:.3f}",
            f"{per_class['E'].mcc:.3f}",
            f"{per_class['H'].sov:.3f}",
            f"{per_class['E'].sov:.3f}",
        )
    console.print(summary)

    if output:
        frame.to_csv(output, sep="\t", index=False)
        console.print(f"[green]✓[/green] Scores saved to: {output}")


@cli.command("list-predictors")
@click.option("--detailed", "-d", is_flag=True, help="Show detailed information")
def list_predictors_cmd(detailed: bool):
    """
    List all available prediction methods.

    Shows name, type, and capabilities for each registered predictor.
    """
    from ..predictors.base import list_predictors

    predictors = list_predictors()

    table = Table(
        title="Available Predictors",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Name", style="bold")
    table.add_column("Version")
    table.add_column("Type")
    table.add_column("Capabilities")

    if detailed:
        table.add_column("Citation")

    for pred in predictors:
        row = [
            pred["name"],
            pred["version"],
            pred["type"],
            ", ".join(pred["capabilities"]) or "-",
        ]
        if detailed:
            row.append(pred["citation"] or "-")
        table.add_row(*row)

    console.print(table)

    if detailed:
        console.print("\n[bold]Predictor Types:[/bold]")
        console.print("  • rule_based: Chou-Fasman nucleation and extension")
        console.print("  • signal_refined: Wavelet-located nucleation sites")
        console.print("  • statistical: Trained windowed amino-acid statistics")


@cli.command("info")
@click.argument("predictor_name")
def info(predictor_name: str):
    """
    Show detailed information about a specific predictor.

    PREDICTOR_NAME is the name of the predictor (case-insensitive).
    """
    from ..predictors.base import PredictorError, get_predictor

    try:
        pred = get_predictor(predictor_name)
    except PredictorError as e:
        console.print(f"[red]{e}[/red]")
        console.print("Run 'sspred list-predictors' to see available options.")
        sys.exit(1)

    details = pred.get_info()
    panel_content = f"""
[bold]Name:[/bold] {details['name']}
[bold]Version:[/bold] {details['version']}
[bold]Type:[/bold] {details['type']}

[bold]Capabilities:[/bold]
{chr(10).join('  • ' + c for c in details['capabilities'])}

[bold]Description:[/bold]
{details['description'] or 'No description available.'}

[bold]Citation:[/bold]
{details['citation'] or 'No citation available.'}
"""

    console.print(Panel(
        panel_content.strip(),
        title=f"[bold]{details['name']}[/bold]",
        border_style="blue",
    ))


@cli.command("validate-sequence")
@click.argument("sequence", required=False)
@click.option("--file", "-f", type=click.Path(exists=True), help="FASTA file to validate")
def validate_sequence(sequence: Optional[str], file: Optional[str]):
    """
    Validate protein sequence(s) before prediction.

    Checks for valid amino acid characters and flags sequences with many
    non-standard residues.

    \b
    Examples:
        sspred validate-sequence MVLSPADKTNVKAAWGKVGAHAGEYGAEALERMF
        sspred validate-sequence -f proteins.fasta
    """
    from ..core.sequence import SequenceValidator, clean_sequence

    validator = SequenceValidator(allow_ambiguous=True, max_nonstandard_fraction=0.1)

    sequences_to_check = []

    if sequence:
        sequences_to_check.append(("command_line", clean_sequence(sequence)))

    if file:
        from Bio import SeqIO

        try:
            for record in SeqIO.parse(file, "fasta"):
                sequences_to_check.append((record.id, clean_sequence(str(record.seq))))
        except OSError as e:
            fail(f"Error reading file: {e}")

    if not sequences_to_check:
        console.print("[yellow]No sequence provided. Use --help for usage.[/yellow]")
        sys.exit(1)

    all_valid = True

    for seq_id, seq in sequences_to_check:
        is_valid, errors = validator.validate(seq)

        if is_valid:
            console.print(f"[green]✓[/green] {seq_id}: Valid ({len(seq)} residues)")
        else:
            all_valid = False
            console.print(f"[red]✗[/red] {seq_id}: Invalid")
            for error in errors:
                console.print(f"    - {error}")

    sys.exit(0 if all_valid else 1)


def main():
    """Main entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
