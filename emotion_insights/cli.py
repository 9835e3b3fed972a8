"""CLI interface for transcript emotion analysis."""

import asyncio
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

from .analyzer import AnalysisRun, TranscriptAnalyzer
from .classifiers import (
    ClassifierConfig,
    LocalZeroShotClassifier,
    RemoteZeroShotClassifier,
)
from .constants import (
    DEFAULT_DEVICE,
    DEFAULT_MODEL,
    EXIT_CODE_ERROR,
    MAX_UTTERANCES,
    ClassifierBackend,
    CliHelp,
    LogMessage,
    SourceKind,
)
from .errors import EmotionInsightsError
from .formatters import render_classification, render_report
from .parsers import detect_source_kind, resolve_source_kind
from .storage import ReportStorage

app = typer.Typer(help=CliHelp.APP)
console = Console()


def _configure_logging(*, verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def build_classifier(
    *,
    backend: ClassifierBackend,
    model: str,
    device: str,
    hf_token: str | None,
) -> LocalZeroShotClassifier | RemoteZeroShotClassifier:
    """Create the classifier backend selected on the command line."""
    config = ClassifierConfig(model=model, device=device)
    if backend == ClassifierBackend.REMOTE:
        return RemoteZeroShotClassifier(api_token=hf_token, config=config)
    return LocalZeroShotClassifier(config=config)


async def _analyze_async(
    *,
    raw: bytes | str,
    source_kind: str,
    classifier: LocalZeroShotClassifier | RemoteZeroShotClassifier,
    output: Path | None,
    csv_output: Path | None,
) -> AnalysisRun:
    """Async implementation shared by the analyze commands."""
    async with classifier:
        analyzer = TranscriptAnalyzer(classifier=classifier)

        with Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            console=console,
        ) as progress:
            task_id = progress.add_task("Classifying utterances...", total=1.0)
            run = await analyzer.run_async(
                raw=raw,
                source_kind=source_kind,
                progress_callback=lambda fraction: progress.update(
                    task_id, completed=fraction
                ),
            )

    if run.report.truncated:
        logger.warning(
            f"Input was truncated to the first {MAX_UTTERANCES} items; "
            "later messages were not analyzed"
        )

    storage = ReportStorage()
    if output is not None:
        storage.save_report(report=run.report, filepath=output)
    if csv_output is not None:
        storage.save_utterances_csv(utterances=run.utterances, filepath=csv_output)

    render_report(run.report, console)
    return run


def _run(coro) -> None:
    """Run a coroutine, turning failures into a non-zero exit code."""
    try:
        asyncio.run(coro)
    except EmotionInsightsError as e:
        logger.error(LogMessage.ERROR_OCCURRED.format(e))
        raise typer.Exit(code=EXIT_CODE_ERROR)
    except Exception as e:
        logger.exception(LogMessage.ERROR_OCCURRED.format(e))
        raise typer.Exit(code=EXIT_CODE_ERROR)


@app.command()
def analyze(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    kind: str | None = typer.Option(None, "--kind", "-k", help=CliHelp.KIND),
    backend: ClassifierBackend = typer.Option(
        ClassifierBackend.LOCAL,
        "--backend",
        "-b",
        envvar="EMOTION_INSIGHTS_BACKEND",
        help=CliHelp.BACKEND,
    ),
    model: str = typer.Option(
        DEFAULT_MODEL, "--model", envvar="EMOTION_INSIGHTS_MODEL", help=CliHelp.MODEL
    ),
    device: str = typer.Option(
        DEFAULT_DEVICE,
        "--device",
        envvar="EMOTION_INSIGHTS_DEVICE",
        help=CliHelp.DEVICE,
    ),
    hf_token: str | None = typer.Option(
        None, "--hf-token", envvar="HF_API_TOKEN", help=CliHelp.HF_TOKEN
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help=CliHelp.OUTPUT),
    csv_output: Path | None = typer.Option(None, "--csv-output", help=CliHelp.CSV_OUTPUT),
    verbose: bool = typer.Option(False, "--verbose", "-v", help=CliHelp.VERBOSE),
) -> None:
    """Analyze a transcript file (CSV, JSON or plain text)."""
    _configure_logging(verbose=verbose)

    try:
        source_kind = resolve_source_kind(kind) if kind else detect_source_kind(path)
    except EmotionInsightsError as e:
        logger.error(LogMessage.ERROR_OCCURRED.format(e))
        raise typer.Exit(code=EXIT_CODE_ERROR)

    classifier = build_classifier(
        backend=backend, model=model, device=device, hf_token=hf_token
    )
    _run(
        _analyze_async(
            raw=path.read_bytes(),
            source_kind=source_kind,
            classifier=classifier,
            output=output,
            csv_output=csv_output,
        )
    )


@app.command("analyze-text")
def analyze_text(
    text: str = typer.Argument(..., help="Pasted conversation text."),
    kind: str = typer.Option(
        SourceKind.CHAT_TEXT.value, "--kind", "-k", help=CliHelp.TEXT_KIND
    ),
    backend: ClassifierBackend = typer.Option(
        ClassifierBackend.LOCAL,
        "--backend",
        "-b",
        envvar="EMOTION_INSIGHTS_BACKEND",
        help=CliHelp.BACKEND,
    ),
    model: str = typer.Option(
        DEFAULT_MODEL, "--model", envvar="EMOTION_INSIGHTS_MODEL", help=CliHelp.MODEL
    ),
    device: str = typer.Option(
        DEFAULT_DEVICE,
        "--device",
        envvar="EMOTION_INSIGHTS_DEVICE",
        help=CliHelp.DEVICE,
    ),
    hf_token: str | None = typer.Option(
        None, "--hf-token", envvar="HF_API_TOKEN", help=CliHelp.HF_TOKEN
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help=CliHelp.OUTPUT),
    csv_output: Path | None = typer.Option(None, "--csv-output", help=CliHelp.CSV_OUTPUT),
    verbose: bool = typer.Option(False, "--verbose", "-v", help=CliHelp.VERBOSE),
) -> None:
    """Analyze pasted conversation text."""
    _configure_logging(verbose=verbose)

    try:
        source_kind = resolve_source_kind(kind)
    except EmotionInsightsError as e:
        logger.error(LogMessage.ERROR_OCCURRED.format(e))
        raise typer.Exit(code=EXIT_CODE_ERROR)

    classifier = build_classifier(
        backend=backend, model=model, device=device, hf_token=hf_token
    )
    _run(
        _analyze_async(
            raw=text,
            source_kind=source_kind,
            classifier=classifier,
            output=output,
            csv_output=csv_output,
        )
    )


async def _classify_async(
    *,
    text: str,
    classifier: LocalZeroShotClassifier | RemoteZeroShotClassifier,
) -> None:
    async with classifier:
        analyzer = TranscriptAnalyzer(classifier=classifier)
        item = await analyzer.classify_text(text=text)
    render_classification(item, console)


@app.command()
def classify(
    text: str = typer.Argument(..., help="Text to classify."),
    backend: ClassifierBackend = typer.Option(
        ClassifierBackend.LOCAL,
        "--backend",
        "-b",
        envvar="EMOTION_INSIGHTS_BACKEND",
        help=CliHelp.BACKEND,
    ),
    model: str = typer.Option(
        DEFAULT_MODEL, "--model", envvar="EMOTION_INSIGHTS_MODEL", help=CliHelp.MODEL
    ),
    device: str = typer.Option(
        DEFAULT_DEVICE,
        "--device",
        envvar="EMOTION_INSIGHTS_DEVICE",
        help=CliHelp.DEVICE,
    ),
    hf_token: str | None = typer.Option(
        None, "--hf-token", envvar="HF_API_TOKEN", help=CliHelp.HF_TOKEN
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help=CliHelp.VERBOSE),
) -> None:
    """Classify a single piece of text for sentiment, emotion, urgency and topic."""
    _configure_logging(verbose=verbose)

    classifier = build_classifier(
        backend=backend, model=model, device=device, hf_token=hf_token
    )
    _run(_classify_async(text=text, classifier=classifier))
