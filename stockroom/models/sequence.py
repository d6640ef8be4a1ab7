"""
DocumentSequence model — server-side document numbering.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class DocumentSequence(models.Model):
    """
    Last number issued for a prefix.

    Read and incremented under select_for_update() by
    stockroom.services.numbering.next_document_number().
    """

    prefix = models.CharField(max_length=10, unique=True, verbose_name=_('Prefix'))
    last_value = models.PositiveIntegerField(default=0, verbose_name=_('Last value'))

    class Meta:
        verbose_name = _('Document sequence')
        verbose_name_plural = _('Document sequences')
        ordering = ['prefix']

    def __str__(self) -> str:
        return f"{self.prefix}: {self.last_value}"
