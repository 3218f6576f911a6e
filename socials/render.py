"""
Turns cycle results and settings into console markup lines.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from rich.markup import escape

from socials.config import SOURCE_LABELS, SOURCES
from socials.models import CycleState, FetchOutcome, MatchedItem
from socials.settings_store import Configuration
from socials.sources.reddit import subreddit_from_body
from socials.utils import extract_domain_from_url, format_age

HELP_LINES = [
    "[bold][underline]Available Commands[/underline][/bold]",
    "[cyan]+/- \"kw\" or +/-<src> \"kw\"[/cyan]   - Add/remove keywords for sources.",
    "[cyan]~<src> <limit|default>[/cyan]      - Set per-source limit or reset to global.",
    "[cyan]list[/cyan]                        - Show a summary of all monitored keywords.",
    "[cyan]set list <number>[/cyan]           - Set the global default for max results per source.",
    "[cyan]set interval <min>[/cyan]          - Set fetch interval in minutes.",
    "[cyan]save / load / set default[/cyan]   - Manage settings files.",
    "[cyan]fetch / clear / help / exit[/cyan] - Utility commands.",
    "",
]


def quoted_keywords(keywords: List[str]) -> str:
    return " ".join(f"[bold]\"{escape(kw)}\"[/bold]" for kw in keywords)


def render_item(matched: MatchedItem, now: Optional[datetime] = None) -> List[str]:
    """
    Format one result as console lines.

    Args:
        matched: Matched result
        now: Reference time for relative ages

    Returns:
        Lines of markup, ending with a blank separator
    """
    item = matched.item
    label = SOURCE_LABELS.get(item.source, item.source)
    keywords = quoted_keywords(matched.matched_keywords)
    link = escape(item.link or "")
    lines: List[str] = []

    if item.source == "reddit":
        subreddit = subreddit_from_body(item.raw_body)
        where = f" /r/{escape(subreddit)}" if subreddit else ""
        lines.append(f"[green][bold]\\[{label}][/bold]{where} :: {keywords}[/green]")
        lines.append(f"  {matched.highlighted_title}")
        lines.append(f"  [dim]{link}[/dim] - {format_age(item.published_at, now)}")
    else:
        header = f"[green][bold]\\[{label}][/bold][/green]"
        if item.source == "ddg":
            domain = extract_domain_from_url(item.link)
            if domain:
                header += f" {escape(domain)}"
        lines.append(header)
        lines.append(f"  {matched.highlighted_title}")
        if matched.matched_keywords:
            lines.append(f"  Keywords: {keywords}")
        if matched.highlighted_snippet:
            lines.append(f"  {matched.highlighted_snippet}")
        age = f" - {format_age(item.published_at, now)}" if item.published_at else ""
        lines.append(f"  [dim]{link}[/dim]{age}")

    lines.append("")
    return lines


def render_results(
    items: List[MatchedItem],
    header: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[str]:
    lines: List[str] = []
    if header:
        lines.append(f"[bold]--- {escape(header)} ---[/bold]")
    if items:
        lines.append(f"Displaying {len(items)} results.")
    for matched in items:
        lines.extend(render_item(matched, now))
    return lines


def render_failure(outcome: FetchOutcome) -> str:
    label = SOURCE_LABELS.get(outcome.source, outcome.source)
    return f"[red]Error fetching {label} for \"{escape(outcome.keyword)}\": {escape(outcome.error or '')}[/red]"


def render_keyword_list(config: Configuration) -> List[str]:
    lines = ["[bold]--- Current Keyword Settings ---[/bold]"]
    for source in SOURCES:
        keywords = config.keywords.for_source(source)
        if not keywords:
            continue
        lines.append(f"[green][bold]\\[{source.upper()}][/bold][/green]")
        lines.extend(f"  - \"{escape(kw)}\"" for kw in keywords)
    lines.append("")
    return lines


def render_settings_summary(config: Configuration) -> List[str]:
    """Keyword listing followed by the effective limits and interval."""
    lines = render_keyword_list(config)
    lines.append("[bold]--- Limits ---[/bold]")
    for source in SOURCES:
        if source in config.limits:
            lines.append(f"  {source}: {config.limits[source]}")
        else:
            lines.append(f"  {source}: {config.global_limit} (global default)")
    lines.append(f"  Fetch interval: {config.fetch_interval_minutes} minutes")
    lines.append("")
    return lines


def render_status(state: CycleState, config: Configuration) -> str:
    keywords = " | ".join(
        escape(f"{source}:[{','.join(config.keywords.for_source(source))}]") for source in SOURCES
    )
    if state is CycleState.FETCHING:
        status = "[yellow]Fetching...[/yellow]"
    else:
        status = "[green]Idle[/green]"
    return f" {status} | Keywords: {keywords}"
