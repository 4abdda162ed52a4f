"""
Pipeline Stages with Rich Terminal UI

Each stage of the pipeline (counting, model building, vocabulary generation,
corpus export) wrapped with progress bars and summary tables using the Rich
library.
"""

from typing import Dict, Optional, List

from rich.console import Console
from rich.progress import (
    Progress, SpinnerColumn, TextColumn, BarColumn,
    TaskProgressColumn, TimeElapsedColumn
)
from rich.panel import Panel
from rich.table import Table
from rich import box

from .config import CountConfig, BuildConfig
from .corpus import count_corpus, export_brown_corpus, generate_vocabulary, write_vocabulary
from .counts import NGramCounts, write_counts
from .model import LanguageModel, format_number, load_model


console = Console(stderr=True)


def create_stats_table(stats: Dict) -> Table:
    """Create a Rich table displaying pipeline statistics."""
    table = Table(box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="green")
    table.add_column("Value", style="yellow", justify="right")

    for key, value in stats.items():
        # Format the key nicely
        display_key = key.replace('_', ' ').title()

        # Format the value
        if value is None:
            display_value = "-"
        elif isinstance(value, float):
            display_value = f"{value:,.4f}"
        elif isinstance(value, int):
            display_value = f"{value:,}"
        elif isinstance(value, list):
            display_value = f"{len(value)} items"
        else:
            display_value = str(value)

        table.add_row(display_key, display_value)

    return table


def create_order_table(counts: NGramCounts) -> Table:
    """Per-order unique and total counts."""
    table = Table(box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Order", style="green", justify="right")
    table.add_column("Unique", style="yellow", justify="right")
    table.add_column("Total", style="yellow", justify="right")
    for order in range(1, counts.max_order + 1):
        table.add_row(str(order), f"{counts.unique(order):,}", f"{counts.total(order):,}")
    return table


def count_ngrams_cli(config: CountConfig) -> NGramCounts:
    """
    Count n-grams in a corpus file and write the counts file.

    Args:
        config: Counting settings

    Returns:
        The populated tables
    """
    console.print(Panel.fit(
        f"[bold blue]Counting n-grams up to order {config.max_order}[/bold blue]",
        border_style="blue"
    ))

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console
    ) as progress:
        task = progress.add_task("[cyan]Reading corpus...", total=None)

        def update_progress(sentences_done):
            progress.update(task, description=f"[cyan]Counted {sentences_done:,} sentences")

        with open(config.corpus_path, encoding="utf-8") as f:
            counts = count_corpus(f, config.max_order, lowercase=config.lowercase,
                                  progress_callback=update_progress)

        progress.update(task, description="[cyan]Writing counts...")
        with open(config.output_path, "w", encoding="utf-8", newline="\n") as out:
            write_counts(counts, out)

    console.print(create_order_table(counts))
    console.print(f"[green]✓[/green] Counts saved to: [bold]{config.output_path}[/bold]")
    return counts


def build_model_cli(config: BuildConfig) -> LanguageModel:
    """
    Build a smoothed language model from a counts file and write it.

    Args:
        config: Model-building settings

    Returns:
        The built LanguageModel
    """
    console.print(Panel.fit(
        "[bold blue]N-gram Language Model Building[/bold blue]",
        border_style="blue"
    ))

    config_table = Table(box=box.SIMPLE, show_header=False)
    config_table.add_column("Setting", style="cyan")
    config_table.add_column("Value", style="white")
    config_table.add_row("Counts File", str(config.counts_path))
    config_table.add_row("Vocabulary", str(config.vocab_path) if config.vocab_path else "Open")
    config_table.add_row("Delta", str(config.delta))
    console.print(Panel(config_table, title="[bold]Configuration[/bold]", border_style="green"))

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console
    ) as progress:
        task = progress.add_task("[cyan]Loading counts...", total=2)
        model = LanguageModel.from_files(config.counts_path, delta=config.delta,
                                         vocab_path=config.vocab_path)
        progress.update(task, advance=1, description="[cyan]Writing model...")
        model.save(config.output_path, precision=config.precision)
        progress.update(task, advance=1)

    console.print(Panel(
        create_stats_table(model.stats()),
        title="[bold]Model Statistics[/bold]",
        border_style="yellow"
    ))
    if model.closing_stats:
        added = ", ".join(f"{order}-grams: {n:,}" for order, n in model.closing_stats.items())
        console.print(f"[green]✓[/green] Vocabulary closing added {added}")
    console.print(f"[green]✓[/green] Model saved to: [bold]{config.output_path}[/bold]")
    return model


def show_model_cli(path, order: Optional[int] = None, top_k: int = 10) -> Dict:
    """Print a model file's summary and its most frequent entries."""
    model = load_model(path)

    summary = Table(box=box.ROUNDED, show_header=True, header_style="bold cyan")
    summary.add_column("Order", style="green", justify="right")
    summary.add_column("Unique", style="yellow", justify="right")
    summary.add_column("Total", style="yellow", justify="right")
    for n, row in sorted(model['summary'].items()):
        summary.add_row(str(n), f"{row['unique']:,}", f"{row['total']:,}")
    console.print(Panel(summary, title=f"[bold]{path}[/bold]", border_style="blue"))

    orders = [order] if order else sorted(model['entries'])
    for n in orders:
        table = Table(box=box.SIMPLE, title=f"Top {n}-grams", header_style="bold cyan")
        table.add_column("N-gram", style="white")
        table.add_column("Count", style="yellow", justify="right")
        table.add_column("P", style="green", justify="right")
        table.add_column("log2 P", style="green", justify="right")
        for entry in model['entries'].get(n, [])[:top_k]:
            table.add_row(entry.ngram, str(entry.count),
                          format_number(entry.probability),
                          format_number(entry.log2_probability))
        console.print(table)

    return model


def generate_vocabulary_cli(input_dir, output_path) -> int:
    """Write the unique tokens of a directory's files to a vocabulary file."""
    with console.status(f"[cyan]Reading files in {input_dir}..."):
        vocab = generate_vocabulary(input_dir)
        with open(output_path, "w", encoding="utf-8", newline="\n") as out:
            write_vocabulary(vocab, out)
    console.print(f"[green]✓[/green] Wrote {len(vocab):,} tokens to: [bold]{output_path}[/bold]")
    return len(vocab)


def export_brown_cli(output_path, categories: Optional[List[str]] = None,
                     lowercase: bool = False) -> Dict:
    """Export the Brown corpus as a line corpus."""
    with console.status("[cyan]Exporting Brown corpus..."):
        stats = export_brown_corpus(output_path, categories=categories, lowercase=lowercase)
    console.print(f"[green]✓[/green] Exported {stats['num_sentences']:,} sentences "
                  f"({stats['total_tokens']:,} tokens) to: [bold]{output_path}[/bold]")
    return stats
