"""Command-line interface for the Bayes classifier.

Provides ``classify``, ``stats``, and ``tokens`` commands with rich
terminal output using the ``click`` and ``rich`` libraries. The classifier
keeps no state between runs, so commands that need a trained model train
one from a corpus file first.

A corpus is a JSON object mapping each category to a list of documents;
categories are added in file order::

    {"spam": ["Buy cheap pills now", ...], "ham": ["Lunch at noon?", ...]}

Usage::

    bayes-classifier classify corpus.json "Cheap pills, buy now"
    bayes-classifier stats corpus.json
    bayes-classifier tokens "The quick brown foxes jumped"
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .classifier import ClassificationResult, Classifier
from .errors import BayesClassifierError

console = Console()


def load_corpus(path: Path) -> dict[str, list[str]]:
    """Read a ``{category: [document, ...]}`` JSON corpus.

    Raises:
        ValueError: If the file is not a JSON object of string lists.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path.name}: corpus must be a JSON object of category -> documents")

    corpus: dict[str, list[str]] = {}
    for category, documents in data.items():
        if isinstance(documents, str):
            documents = [documents]
        if not isinstance(documents, list) or not all(isinstance(d, str) for d in documents):
            raise ValueError(f"{path.name}: documents for {category!r} must be strings")
        corpus[category] = documents
    return corpus


def build_classifier(
    corpus: dict[str, list[str]],
    language: str = "en",
    threshold: Optional[float] = None,
) -> Classifier:
    """Create a classifier and train it on every document of ``corpus``."""
    classifier = Classifier(
        list(corpus),
        language=language,
        enable_threshold=threshold is not None,
        threshold=threshold if threshold is not None else 0.0,
    )
    for category, documents in corpus.items():
        classifier.train_many(category, documents)
    return classifier


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/] {error}")
    sys.exit(1)


@click.group()
@click.version_option(package_name="bayes-classifier")
def main() -> None:
    """Naive Bayes text classifier.

    Train categories from a JSON corpus and classify text against them.
    """
    pass


@main.command()
@click.argument("corpus", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("text")
@click.option("--language", "-l", default="en", show_default=True,
              help="Language tag for stopwords and stemming.")
@click.option("--threshold", "-t", type=float, default=None,
              help="Reject results scoring below this value.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def classify(
    corpus: Path, text: str, language: str, threshold: Optional[float], output: str
) -> None:
    """Train on CORPUS and classify TEXT.

    Example: bayes-classifier classify corpus.json "cheap pills"
    """
    try:
        classifier = build_classifier(load_corpus(corpus), language, threshold)
        result = classifier.classify_result(text)
    except (BayesClassifierError, ValueError) as e:
        _fail(e)
        return

    if output == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _render_result(result, threshold)


@main.command()
@click.argument("corpus", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--language", "-l", default="en", show_default=True,
              help="Language tag for stopwords and stemming.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def stats(corpus: Path, language: str, output: str) -> None:
    """Train on CORPUS and show per-category statistics."""
    try:
        classifier = build_classifier(load_corpus(corpus), language)
    except (BayesClassifierError, ValueError) as e:
        _fail(e)
        return

    store = classifier.store
    counts = store.category_counts
    word_counts = store.category_word_count
    rows = [
        {
            "category": category,
            "documents": counts.get(category, 0),
            "words": word_counts.get(category, 0),
            "vocabulary": len(words),
        }
        for category, words in store.items()
    ]

    if output == "json":
        click.echo(json.dumps({"total_words": store.total_words, "categories": rows}, indent=2))
        return

    table = Table(title=f"Training statistics: {corpus.name}")
    table.add_column("Category", style="cyan")
    table.add_column("Documents", justify="right")
    table.add_column("Words", justify="right")
    table.add_column("Vocabulary", justify="right")
    for row in rows:
        table.add_row(row["category"], str(row["documents"]), str(row["words"]),
                      str(row["vocabulary"]))

    console.print(table)
    console.print(f"Total words: [bold]{store.total_words}[/]")


@main.command()
@click.argument("text")
@click.option("--language", "-l", default="en", show_default=True,
              help="Language tag for stopwords and stemming.")
@click.option("--symbols", is_flag=True, help="Also count punctuation symbols.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def tokens(text: str, language: str, symbols: bool, output: str) -> None:
    """Show the stemmed word counts extracted from TEXT."""
    try:
        classifier = Classifier(language=language)
    except ValueError as e:
        _fail(e)
        return

    if symbols:
        counts = classifier.tokenizer.word_hash_with_symbols(text, classifier.language)
    else:
        counts = classifier.tokenizer.word_hash(text, classifier.language)

    if output == "json":
        click.echo(json.dumps(counts, indent=2, ensure_ascii=False))
        return

    table = Table(title="Word frequencies")
    table.add_column("Stem", style="cyan")
    table.add_column("Count", justify="right")
    for word, count in counts.items():
        table.add_row(word, str(count))
    console.print(table)


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_result(result: ClassificationResult, threshold: Optional[float]) -> None:
    """Render a ClassificationResult with rich formatting."""
    console.print()

    if result.rejected:
        headline = Text(f"No classification (best: {result.best_category})", style="bold yellow")
    else:
        headline = Text(str(result.category), style="bold green")

    subtitle = f"score {result.score:.4f}"
    if threshold is not None:
        subtitle += f" | threshold {threshold:.4f}"
    console.print(Panel(headline, title="Classification", subtitle=subtitle, border_style="blue"))

    table = Table(title="Scores", show_lines=False)
    table.add_column("#", justify="right", width=4)
    table.add_column("Category", style="cyan")
    table.add_column("Score", justify="right")

    ranked = sorted(result.scores.items(), key=lambda x: -x[1])
    for i, (category, score) in enumerate(ranked, 1):
        style = "bold" if category == result.best_category else ""
        table.add_row(str(i), Text(category, style=style), f"{score:.4f}")

    console.print(table)
    console.print()


if __name__ == "__main__":
    main()
