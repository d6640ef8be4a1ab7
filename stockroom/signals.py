"""
Stockroom signals.

document_validated is sent after the validation transaction commits:

    @receiver(document_validated)
    def on_validated(sender, document, movements, user, **kwargs):
        ...

sender is the document model class.
"""

from django.dispatch import Signal

document_validated = Signal()
