"""Command line interface for the question-matching engine.

Usage:
    tanya ask "Berapa harga paket premium?" --json
    tanya train --dataset data/dataset.json --iterations 2000 --seed 7
    tanya stats
    tanya validate data/dataset.json

Environment Variables:
    TANYA_DATASET_PATH: Dataset JSON file (default: ./data/dataset.json)
    TANYA_MODEL_PATH: Model JSON file (default: ./models/brain-model.json)
    TANYA_LOG_FILE: Optional run log file for ``train``
    Other TANYA_* variables are read by ``EngineConfig.from_env``.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

import click

from tanya.classifier.store import ModelStore
from tanya.config import EngineConfig
from tanya.errors import TanyaError
from tanya.search.corpus import read_corpus_file, unique_tags
from tanya.search.engine import QAEngine
from tanya.search.types import RankedMatch
from tanya.shared.logger import RunLogger


def _format_table(matches: tuple[RankedMatch, ...]) -> str:
    """Format ranked matches as a terminal table."""
    if not matches:
        return "No matches found."

    lines = [
        "Rank  Score    Tags                Question",
        "----  -----    ----                --------",
    ]
    for match in matches:
        tags = ",".join(sorted(match.entry.tags)) or "-"
        if len(tags) > 18:
            tags = tags[:15] + "..."
        question = match.entry.question
        if len(question) > 50:
            question = question[:47] + "..."
        lines.append(f"{match.rank:<6}{match.score.combined:<9.4f}{tags:<20}{question}")

    return "\n".join(lines)


def _build_config(dataset: str | None, model: str | None) -> EngineConfig:
    config = EngineConfig.from_env()
    changes: dict[str, Any] = {}
    if dataset:
        changes["dataset_path"] = Path(dataset)
    if model:
        changes["model_path"] = Path(model)
    return config.with_overrides(**changes) if changes else config


def _answer_payload(answer) -> dict[str, Any]:
    return {
        "answer": answer.text,
        "source": answer.source,
        "category": answer.category,
        "confidence": round(answer.confidence, 4),
        "tags": list(answer.tags),
        "intent": answer.intent,
        "matches": [
            {
                "rank": m.rank,
                "question": m.entry.question,
                "tags": sorted(m.entry.tags),
                "score": round(m.score.combined, 4),
                "exact": round(m.score.exact, 4),
                "stemmed": round(m.score.stemmed, 4),
                "semantic": round(m.score.semantic, 4),
                "contextual": round(m.score.contextual, 4),
            }
            for m in answer.matches
        ],
    }


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Match questions against a Q&A corpus and tag them."""
    ctx.ensure_object(dict)
    run_log = RunLogger(
        log_file=os.getenv("TANYA_LOG_FILE") or None,
        min_level="DEBUG" if verbose else "WARN",
    )
    run_log.install_stdlib_bridge(level=logging.DEBUG if verbose else logging.INFO)
    ctx.obj["log"] = run_log
    ctx.call_on_close(run_log.close)


@cli.command()
@click.argument("question")
@click.option("--dataset", type=click.Path(dir_okay=False), help="Dataset JSON file")
@click.option("--model", type=click.Path(dir_okay=False), help="Model JSON file")
@click.option("--json", "json_output", is_flag=True, help="Output raw JSON instead of formatted text")
def ask(question: str, dataset: str | None, model: str | None, json_output: bool) -> None:
    """Answer QUESTION from the corpus, training a model first if none exists."""
    config = _build_config(dataset, model)
    try:
        with QAEngine(config) as engine:
            engine.initialize()
            answer = engine.find_answer(question)
    except TanyaError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if json_output:
        click.echo(json.dumps(_answer_payload(answer), indent=2, ensure_ascii=False))
        return

    click.echo(answer.text)
    click.echo("")
    click.echo(f"Confidence: {answer.confidence:.4f} ({answer.source}, {answer.category})")
    click.echo(f"Tags: {', '.join(answer.tags)}")
    click.echo("")
    click.echo(_format_table(answer.matches))


@cli.command()
@click.option("--dataset", type=click.Path(dir_okay=False), help="Dataset JSON file")
@click.option("--model", type=click.Path(dir_okay=False), help="Model JSON file")
@click.option("--iterations", type=int, help="Maximum training iterations")
@click.option("--seed", type=int, help="Random seed for augmentation and weights")
@click.pass_context
def train(ctx: click.Context, dataset: str | None, model: str | None, iterations: int | None, seed: int | None) -> None:
    """Train the tag classifier and save it to the model file."""
    run_log: RunLogger = ctx.obj["log"]
    run_log.min_level = min(run_log.min_level, run_log.LEVELS["INFO"])

    config = _build_config(dataset, model)
    training = config.training
    if iterations is not None:
        training = replace(training, max_iterations=iterations)
    if seed is not None:
        training = replace(training, seed=seed)
    config = config.with_overrides(training=training)

    def on_progress(iteration: int, total: int, error: float, eta: float) -> None:
        run_log.progress(iteration, total, label=f"error {error:.5f}", eta=eta)

    run_log.section("TRAINING")
    try:
        with QAEngine(config, store=ModelStore(config.model_path)) as engine:
            with run_log.timer("load_corpus"):
                engine.load_corpus(config.dataset_path)
            with run_log.timer("train"):
                result = engine.train(progress=on_progress)
            path = engine.save_model()
    except TanyaError as e:
        run_log.error(f"Training failed: {e}")
        sys.exit(1)

    run_log.metric("dataset_size", result.dataset_size)
    run_log.metric("augmented_size", result.augmented_size)
    run_log.metric("iterations", result.iterations)
    run_log.metric("final_error", result.final_error)
    run_log.metric("tags", len(result.tags))
    run_log.info(f"Model saved to {path}")
    run_log.summary()


@cli.command()
@click.option("--dataset", type=click.Path(dir_okay=False), help="Dataset JSON file")
@click.option("--model", type=click.Path(dir_okay=False), help="Model JSON file")
def stats(dataset: str | None, model: str | None) -> None:
    """Print corpus, model and cache statistics."""
    config = _build_config(dataset, model)
    engine = QAEngine(config)
    engine.load_corpus(config.dataset_path)
    try:
        blob = engine.store.load()
        if blob is not None:
            engine.import_model(blob)
    except TanyaError as e:
        click.echo(f"Warning: {e}", err=True)
    click.echo(json.dumps(engine.stats(), indent=2, ensure_ascii=False))


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False))
def validate(path: str) -> None:
    """Validate a dataset file and report entry and tag counts."""
    try:
        entries = read_corpus_file(path)
    except TanyaError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    tags = unique_tags(entries)
    click.echo(f"{path}: {len(entries)} entries, {len(tags)} tags")
    click.echo(f"Tags: {', '.join(tags) if tags else '-'}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
