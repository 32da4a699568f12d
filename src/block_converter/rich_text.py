"""Rendering of inline rich text runs to markdown."""

from typing import List

from src.models import InlineRun, MentionKind, RunKind


def reference_token(target_id: str) -> str:
    """Internal reference to a Notion page or database, resolved by the vault."""
    return f"[[remote-id: {target_id}]]"


def plain_text(runs: List[InlineRun]) -> str:
    """Concatenate run text without any markup."""
    return ''.join(run.text for run in runs)


def _render_mention(run: InlineRun) -> str:
    if run.mention in (MentionKind.PAGE, MentionKind.DATABASE) and run.target_id:
        return reference_token(run.target_id)
    if run.mention == MentionKind.DATE and run.date_start:
        if run.date_end:
            return f"{run.date_start} → {run.date_end}"
        return run.date_start
    if run.mention == MentionKind.USER:
        return f"@{run.text.lstrip('@')}"
    if run.mention == MentionKind.LINK_PREVIEW and run.href:
        return f"[{run.text}]({run.href})"
    return run.text


def convert_inline_run(run: InlineRun) -> str:
    """Render one run, wrapping it in its annotation markers.

    Wrappers nest in a fixed order: code innermost, then bold, italic,
    strikethrough, underline, and highlight outermost.
    """
    if run.kind == RunKind.EQUATION:
        text = f"${run.expression if run.expression is not None else run.text}$"
    elif run.kind == RunKind.MENTION:
        text = _render_mention(run)
    elif run.href:
        text = f"[{run.text}]({run.href})"
    else:
        text = run.text

    a = run.annotations
    if a.code:
        text = f"`{text}`"
    if a.bold:
        text = f"**{text}**"
    if a.italic:
        text = f"*{text}*"
    if a.strikethrough:
        text = f"~~{text}~~"
    if a.underline:
        text = f"<u>{text}</u>"
    if a.highlighted:
        text = f"=={text}=="

    return text


def convert_rich_text(runs: List[InlineRun]) -> str:
    """Render a sequence of runs, preserving their order."""
    return ''.join(convert_inline_run(run) for run in runs)
