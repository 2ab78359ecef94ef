import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

from cadence_cli.ai import AIAnalyzer
from cadence_cli.config import Config, generate_sample_config, load_config
from cadence_cli.detectors.scoring import DetectionEngine
from cadence_cli.errors import CadenceError, InvalidTimeDeltaError
from cadence_cli.git_client import build_commit_pairs, get_repo
from cadence_cli.logging_config import setup_logging
from cadence_cli.ui import (
    build_results_table,
    format_ai_opinion,
    format_reasons,
    format_score,
    format_velocity,
    print_welcome,
    render_trend_chart,
    render_verdict,
)
from cadence_cli.velocity import calculate_velocity
from cadence_cli.web import Fetcher

console = Console()
logger = logging.getLogger(__name__)
app = typer.Typer(help="Cadence AI-Generated Commit Detection CLI", add_completion=False)


@app.callback()
def _global_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also append logs to this file"),
):
    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)


def _fail(message: str, export_json: bool = False):
    if export_json:
        print(json.dumps({"error": message}))
    else:
        console.print(f"[bold red]Error[/bold red]: {message}")
    raise typer.Exit(code=1)


def _velocity(pair) -> Optional[float]:
    try:
        return calculate_velocity(pair.stats.additions + pair.stats.deletions, pair.time_delta)
    except InvalidTimeDeltaError:
        return None


def _get_analysis_data(path: str, count: int, config: Config, workers: Optional[int] = None) -> List[dict]:
    repo = get_repo(path)
    items = build_commit_pairs(repo, count, config.exclude_files)
    engine = DetectionEngine.from_config(config)
    verdicts = engine.evaluate_many(items, max_workers=workers)

    results = []
    for (pair, _), verdict in zip(items, verdicts):
        results.append({
            "hash": pair.current.hash,
            "short_hash": pair.current.short_hash,
            "author": pair.current.author,
            "message": pair.current.message.strip().split("\n")[0],
            "additions": pair.stats.additions,
            "deletions": pair.stats.deletions,
            "files_changed": pair.stats.files_changed,
            "time_delta_seconds": pair.time_delta.total_seconds(),
            "velocity_loc_per_min": _velocity(pair),
            "diff": pair.diff_content,
            **verdict.to_dict(),
        })
    return results


@app.command(name="analyze")
def analyze_cmd(
    path: str = typer.Argument(".", help="Path to the Git repository"),
    count: int = typer.Option(20, help="Number of commits to walk"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
    export_json: bool = typer.Option(False, "--json", help="Export results as JSON"),
    use_ai: bool = typer.Option(False, "--ai", help="Ask the configured AI provider about flagged commits"),
    workers: Optional[int] = typer.Option(None, min=1, help="Evaluate commit pairs on this many threads"),
):
    """Score recent commits for signs of automated generation."""
    try:
        config = load_config(config_file)
        results = _get_analysis_data(path, count, config, workers)
    except CadenceError as exc:
        _fail(str(exc), export_json)

    if not results:
        _fail("No commit pairs found (a repository needs at least two commits).", export_json)

    if use_ai:
        analyzer = AIAnalyzer(config.ai)
        if not analyzer.available:
            logger.warning("--ai given but ai.enabled/api_key are not configured")
        for r in results:
            if r["flagged"]:
                r["ai_opinion"] = analyzer.analyze_commit(r["message"], r["diff"])

    for r in results:
        r.pop("diff")

    if export_json:
        print(json.dumps(results, indent=2))
        return

    table = build_results_table(len(results))
    for r in results:
        reasons = format_reasons([(t["strategy"], t["reason"]) for t in r["triggered"]])
        if "ai_opinion" in r:
            reasons += "\n" + format_ai_opinion(r["ai_opinion"])
        table.add_row(
            r["short_hash"],
            r["author"],
            f"+{r['additions']}/-{r['deletions']}",
            format_velocity(r["velocity_loc_per_min"]),
            format_score(r["score"], r["flagged"]),
            reasons,
        )

    console.print(table)
    render_trend_chart(results)
    render_verdict(results)


@app.command(name="init-config")
def init_config_cmd(
    path: Path = typer.Argument(Path("cadence.yaml"), help="Where to write the sample config"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
):
    """Write a commented sample configuration file."""
    if path.exists() and not force:
        _fail(f"'{path}' already exists (use --force to overwrite).")
    try:
        generate_sample_config(path)
    except CadenceError as exc:
        _fail(str(exc))
    console.print(f"[green]✔ Sample configuration written to[/green] {path}")


@app.command(name="webhook")
def webhook_cmd(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
    repo: str = typer.Option(".", help="Local clone the pushed commits are looked up in"),
):
    """Run the webhook server that scores commits from GitHub push events."""
    from cadence_cli.webhook.handlers import PushProcessor
    from cadence_cli.webhook.server import WebhookServer

    try:
        config = load_config(config_file)
        get_repo(repo)
        if not config.webhook.secret:
            logger.warning("webhook.secret is empty; signatures will not be verified")
        processor = PushProcessor(repo, DetectionEngine.from_config(config), config.exclude_files)
        server = WebhookServer(config.webhook, processor)
        console.print(f"[cyan]Starting webhook server on {server.address}[/cyan]")
        server.start()
    except CadenceError as exc:
        _fail(str(exc))


@app.command(name="fetch")
def fetch_cmd(
    url: str = typer.Argument(..., help="Page to fetch (https:// is assumed)"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
    timeout: float = typer.Option(10.0, help="Request timeout in seconds"),
    use_ai: bool = typer.Option(False, "--ai", help="Ask the configured AI provider about the page text"),
):
    """Fetch a web page and extract its readable text."""
    try:
        config = load_config(config_file)
        with Fetcher(timeout=timeout) as fetcher:
            page = fetcher.fetch(url)
    except CadenceError as exc:
        _fail(str(exc))

    console.print(f"[bold]{page.title or '(untitled)'}[/bold]  [dim]{page.url}[/dim]")
    if page.description:
        console.print(f"[dim]{page.description}[/dim]")
    console.print(f"Extracted text: {len(page.main_content)} characters")

    if use_ai:
        console.print(format_ai_opinion(AIAnalyzer(config.ai).analyze_text(page.main_content)))


def main():
    load_dotenv()
    if len(sys.argv) == 1:
        print_welcome()
        sys.argv.append("--help")
    app()


if __name__ == "__main__":
    main()
