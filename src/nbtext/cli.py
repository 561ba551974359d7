"""Command-line interface for nbtext.

Provides ``evaluate``, ``top-terms`` and ``tokenize`` commands with rich
terminal output using the ``click`` and ``rich`` libraries.

Usage::

    nbtext evaluate corpus.json
    nbtext evaluate --folds 5 --positive spam --output json corpus.csv
    nbtext top-terms --representation bigram corpus.jsonl
"""

from __future__ import annotations

import json
import logging
import math
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import REPRESENTATIONS, PipelineConfig
from .corpus import load_corpus
from .errors import NbtextError
from .features import top_terms
from .pipeline import PipelineResult, build_representations, run_pipeline, tokenize_documents

console = Console()


def _setup_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fmt(value: float) -> str:
    return "[dim]undefined[/]" if math.isnan(value) else f"{value:.4f}"


def _load_config(config_file: Path | None) -> PipelineConfig:
    return PipelineConfig.from_file(config_file) if config_file else PipelineConfig()


@click.group()
@click.version_option(package_name="nbtext")
@click.option("--verbose", "-v", count=True, help="Increase log verbosity (-v, -vv).")
def main(verbose: int) -> None:
    """📊 nbtext — Naive Bayes text classification and evaluation.

    Builds bag-of-words, TF-IDF and bigram features for a labeled
    two-class corpus and reports holdout and cross-validation metrics.
    """
    _setup_logging(verbose)


@main.command()
@click.argument("corpus", type=click.Path(exists=True, path_type=Path))
@click.option("--config", "config_file", type=click.Path(exists=True, path_type=Path),
              default=None, help="JSON configuration file.")
@click.option("--folds", "-k", type=int, default=None, help="Cross-validation folds.")
@click.option("--seed", type=int, default=None, help="Random seed for partitioning.")
@click.option("--train-fraction", type=float, default=None, help="Holdout train share.")
@click.option("--alpha", type=float, default=None, help="Smoothing constant.")
@click.option("--positive", default=None, help="Label of the positive class.")
@click.option("--min-term-freq", type=int, default=None,
              help="Minimum term frequency for the unigram vocabulary.")
@click.option("--representation", "-r", "representations", multiple=True,
              type=click.Choice(list(REPRESENTATIONS)),
              help="Representation(s) to evaluate (default: all).")
@click.option("--workers", type=int, default=None, help="Threads for cross-validation folds.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.option("--save", "-s", type=click.Path(path_type=Path), default=None,
              help="Save results to a JSON file.")
def evaluate(
    corpus: Path,
    config_file: Path | None,
    folds: int | None,
    seed: int | None,
    train_fraction: float | None,
    alpha: float | None,
    positive: str | None,
    min_term_freq: int | None,
    representations: tuple[str, ...],
    workers: int | None,
    output: str,
    save: Path | None,
) -> None:
    """Run holdout and k-fold evaluation on a labeled corpus.

    Example: nbtext evaluate --folds 10 corpus.json
    """
    try:
        config = _load_config(config_file).replace(
            folds=folds,
            seed=seed,
            train_fraction=train_fraction,
            alpha=alpha,
            positive_class=positive,
            bow_min_term_freq=min_term_freq,
            representations=representations or None,
            max_workers=workers,
        )
        documents = load_corpus(corpus)
        with console.status("[bold blue]Evaluating...", spinner="dots"):
            result = run_pipeline(documents, config)
    except (NbtextError, ValueError, OSError) as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    payload = json.dumps(result.to_dict(), indent=2)
    if output == "json":
        click.echo(payload)
    else:
        _render_result(result, corpus.name)

    if save:
        try:
            save.write_text(payload, encoding="utf-8")
        except OSError as e:
            console.print(f"[bold red]Error:[/] {escape(str(e))}")
            sys.exit(1)
        console.print(f"\n[dim]Results saved to {save}[/]")


@main.command("top-terms")
@click.argument("corpus", type=click.Path(exists=True, path_type=Path))
@click.option("--representation", "-r", type=click.Choice(list(REPRESENTATIONS)),
              default="bow", help="Feature representation.")
@click.option("--top", "-n", "top_n", type=int, default=10, help="Terms per class.")
@click.option("--config", "config_file", type=click.Path(exists=True, path_type=Path),
              default=None, help="JSON configuration file.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def top_terms_command(
    corpus: Path,
    representation: str,
    top_n: int,
    config_file: Path | None,
    output: str,
) -> None:
    """Show the highest-weight terms per class.

    Example: nbtext top-terms --representation tfidf corpus.json
    """
    try:
        config = _load_config(config_file).replace(representations=(representation,))
        documents = tokenize_documents(load_corpus(corpus))
        dtm = build_representations(documents, config)[representation]
        terms = top_terms(dtm, [d.label for d in documents], top_n)
    except (NbtextError, ValueError, OSError) as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    if output == "json":
        click.echo(json.dumps(
            {label: [[t, round(v, 4)] for t, v in items] for label, items in terms.items()},
            indent=2,
        ))
        return

    for label, items in terms.items():
        table = Table(title=f"Top {representation} terms — {label}")
        table.add_column("#", justify="right", width=4)
        table.add_column("Term", style="cyan")
        table.add_column("Weight", justify="right")
        for i, (term, value) in enumerate(items, 1):
            table.add_row(str(i), term, f"{value:.4g}")
        console.print(table)
        console.print()


@main.command()
@click.argument("corpus", type=click.Path(exists=True, path_type=Path))
@click.option("--limit", type=int, default=10, help="Maximum documents to show.")
def tokenize(corpus: Path, limit: int) -> None:
    """Show the normalized tokens of each document.

    Example: nbtext tokenize --limit 5 corpus.csv
    """
    try:
        documents = tokenize_documents(load_corpus(corpus))
    except (NbtextError, ValueError, OSError) as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    table = Table(title=f"Tokens — {corpus.name}", show_lines=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Label", width=12)
    table.add_column("Tokens", style="white", max_width=80)
    for doc in documents[:limit]:
        tokens = " ".join(doc.tokens) if doc.tokens else "[dim](empty)[/]"
        table.add_row(doc.doc_id, doc.label, tokens)
    console.print(table)


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_result(result: PipelineResult, corpus_name: str) -> None:
    """Render holdout and cross-validation results as rich tables."""
    config = result.config
    n_docs = len(result.partition.train) + len(result.partition.test)

    console.print()
    console.print(Panel(
        f"[bold]{corpus_name}[/]\n"
        f"Documents: {n_docs} | "
        f"Classes: {', '.join(result.classes)} | "
        f"Positive: {result.positive_class} | "
        f"Seed: {config.seed}",
        title="📊 Naive Bayes Evaluation",
        border_style="blue",
    ))

    holdout = Table(
        title=f"Holdout ({len(result.partition.train)} train / "
              f"{len(result.partition.test)} test)",
    )
    holdout.add_column("Representation", style="cyan")
    holdout.add_column("Terms", justify="right")
    for name in ("Accuracy", "Precision", "Recall", "F1"):
        holdout.add_column(name, justify="right")
    holdout.add_column("TP/FP/FN/TN", justify="center")

    for rep in result.representations.values():
        m = rep.holdout.metrics
        c = m.confusion
        holdout.add_row(
            rep.name,
            str(rep.dtm.n_cols),
            _fmt(m.accuracy),
            _fmt(m.precision),
            _fmt(m.recall),
            _fmt(m.f1),
            f"{c.tp}/{c.fp}/{c.fn}/{c.tn}",
        )
    console.print(holdout)
    console.print()

    cv = Table(title=f"{config.folds}-fold cross-validation")
    cv.add_column("Representation", style="cyan")
    cv.add_column("Mean acc.", justify="right")
    cv.add_column("Std", justify="right")
    cv.add_column("Mean F1", justify="right")
    cv.add_column("Undefined", justify="right")
    cv.add_column("Fold accuracies", style="dim")

    for rep in result.representations.values():
        r = rep.cross_validation
        cv.add_row(
            rep.name,
            _fmt(r.mean_accuracy),
            _fmt(r.std_accuracy),
            _fmt(r.mean_f1),
            f"{r.undefined_folds}/{r.k}",
            " ".join("-" if math.isnan(a) else f"{a:.2f}" for a in r.accuracies),
        )
    console.print(cv)
    console.print()


if __name__ == "__main__":
    main()
