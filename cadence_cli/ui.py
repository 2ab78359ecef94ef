import plotille
import pyfiglet
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cadence_cli import __version__

console = Console()


def print_welcome():
    ascii_banner = pyfiglet.figlet_format("CADENCE", font="slant")
    console.print(f"[bold magenta]{ascii_banner}[/bold magenta]")
    console.print(f"[dim]AI-generated commit detection · v{__version__}[/dim]")
    console.print("[dim]" + "─" * 80 + "[/dim]\n")


def build_results_table(count: int) -> Table:
    table = Table(title=f"Last {count} Commit Pairs Analyzed", show_header=True, header_style="bold magenta")
    table.add_column("Commit Hash", style="dim", width=12)
    table.add_column("Author", width=20)
    table.add_column("+/-", justify="right", width=12)
    table.add_column("LOC/min", justify="right", width=9)
    table.add_column("Score", justify="center", width=14)
    table.add_column("Triggered Strategies")
    return table


def format_score(score: float, flagged: bool) -> str:
    if not flagged:
        return f"[green]{score:.2f} (clean)[/green]"
    color = "red bold" if score >= 0.4 else "yellow"
    return f"[{color}]{score:.2f} (flagged)[/{color}]"


def format_velocity(velocity) -> str:
    if velocity is None:
        return "[dim]n/a[/dim]"
    if velocity > 100:
        return f"[bold red]{velocity:.0f}[/bold red]"
    return f"{velocity:.1f}"


def format_reasons(triggered) -> str:
    if not triggered:
        return "[dim]No strategy triggered[/dim]"

    formatted = []
    for name, reason in triggered:
        formatted.append(f"[yellow]•[/yellow] [bold]{name}[/bold]: {reason}")
    return "\n".join(formatted)


def format_ai_opinion(opinion: dict) -> str:
    if opinion.get("score", -1.0) < 0:
        return f"[dim]AI: {opinion.get('reason', 'no opinion')}[/dim]"
    return f"[cyan]AI second opinion {opinion['score']:.2f}[/cyan]: {opinion.get('reason', '')}"


def render_verdict(results: list):
    """Render a summary panel after analysis."""
    if not results:
        return

    flagged = sum(1 for r in results if r["flagged"])
    ratio = flagged / len(results)
    avg_score = sum(r["score"] for r in results) / len(results)

    if ratio >= 0.5:
        verdict_label = "LIKELY AI-ASSISTED"
        verdict_color = "bold red"
        risk_msg = "Most commits tripped at least one heuristic. Manual review strongly recommended."
    elif ratio >= 0.2:
        verdict_label = "MIXED"
        verdict_color = "bold yellow"
        risk_msg = "Some commits warrant closer human review."
    else:
        verdict_label = "LIKELY HUMAN-WRITTEN"
        verdict_color = "bold green"
        risk_msg = "Few automated-generation signals across the analyzed commits."

    summary_text = (
        f"[{verdict_color}]VERDICT: {verdict_label}[/{verdict_color}]\n\n"
        f"  Commit Pairs Analyzed : {len(results)}\n"
        f"  Flagged               : [bold red]{flagged}[/bold red] ({ratio:.0%})\n"
        f"  Mean Strategy Score   : {avg_score:.2f}\n\n"
        f"  [dim]{risk_msg}[/dim]"
    )

    console.print()
    console.print(Panel(
        summary_text,
        title="[bold]Analysis Complete[/bold]",
        border_style=verdict_color.replace("bold ", ""),
        expand=False,
        padding=(1, 4),
    ))
    console.print()


def render_trend_chart(results: list):
    if not results or len(results) < 3:
        console.print("[dim]Not enough commits to generate a trend chart (need at least 3).[/dim]")
        return

    console.print("\n[bold cyan]Strategy Score Over Time (High = more heuristics triggered)[/bold cyan]")

    # oldest to newest
    scores = [r["score"] for r in reversed(results)]
    x_data = list(range(1, len(scores) + 1))

    fig = plotille.Figure()
    fig.width = 60
    fig.height = 15
    fig.set_x_limits(min_=1, max_=len(scores))
    fig.set_y_limits(min_=0.0, max_=1.0)
    fig.y_label = "Score"
    fig.x_label = "Commits (Oldest -> Newest)"

    avg_score = sum(scores) / len(scores)
    plot_color = "green" if avg_score < 0.15 else "yellow" if avg_score < 0.3 else "red"
    fig.plot(x_data, scores, lc=plot_color)

    print(fig.show())
