"""
Document numbering — one sequence row per prefix.

Numbers are issued inside the caller's transaction, so a rolled back
document creation also rolls back its number.
"""

from django.db import transaction

from stockroom.conf import stockroom_settings
from stockroom.models.sequence import DocumentSequence


def format_number(prefix: str, value: int) -> str:
    """RCP, 7 → 'RCP-00007' (padding from NUMBER_PADDING)."""
    return f"{prefix}-{value:0{stockroom_settings.NUMBER_PADDING}d}"


def next_document_number(kind: str) -> str:
    """
    Issue the next number for a document kind.

    Concurrency:
        - Runs under transaction.atomic()
        - Uses select_for_update() on the sequence row
    """
    prefix = stockroom_settings.DOCUMENT_PREFIXES.get(kind)
    if not prefix:
        raise ValueError(f"No document prefix configured for {kind!r}")

    with transaction.atomic():
        DocumentSequence.objects.get_or_create(prefix=prefix)
        sequence = DocumentSequence.objects.select_for_update().get(prefix=prefix)
        sequence.last_value += 1
        sequence.save(update_fields=['last_value'])
        return format_number(prefix, sequence.last_value)
