"""Plain-text rendering of saved words for the platform share sheet."""

from __future__ import annotations

import logging
from collections.abc import Callable

from glosario.exceptions import GlosarioError
from glosario.models import OperationResult, WordEntry

logger = logging.getLogger(__name__)

DEFAULT_FOOTER = "---\nShared from Glosario"


def format_share_text(entry: WordEntry, footer: str = DEFAULT_FOOTER) -> str:
    """Render *entry* as a chat-friendly block with numbered definitions."""
    lines = [f"*{entry.word}*"]
    if entry.etymology:
        lines.append(f"_{entry.etymology}_")
    lines.append("")
    for index, d in enumerate(entry.definitions, start=1):
        line = f"*{index}.* {d.definition}"
        if d.category:
            line += f" _({d.category})_"
        lines.append(line)
        if d.synonyms:
            lines.append(f"*Synonyms:* {', '.join(sorted(d.synonyms))}")
        if d.antonyms:
            lines.append(f"*Antonyms:* {', '.join(sorted(d.antonyms))}")
        lines.append("")
    return "\n".join(lines) + "\n" + footer


def share_entry(
    entry: WordEntry,
    share: Callable[[str, str], None],
    footer: str = DEFAULT_FOOTER,
) -> OperationResult[str]:
    """Format *entry* and hand the text to *share* as ``(text, title)``."""
    text = format_share_text(entry, footer)
    try:
        share(text, f"Definition of {entry.word}")
    except Exception as e:
        logger.exception(f"Sharing {entry.word!r} failed")
        return OperationResult.fail(GlosarioError(f"Could not share: {e}"))
    return OperationResult.ok("Shared", text)
