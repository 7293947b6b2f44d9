"""
ReturnRequest model.
"""

from django.db import models
from django.db.models import IntegerField, Max
from django.db.models.functions import Cast, Coalesce, Substr
from django.utils.translation import gettext_lazy as _


RETURN_ID_PREFIX = 'RET-'


class ReturnRequest(models.Model):
    """
    A customer's request to return goods from an order.

    Approving or rejecting only flips the flags below; returned goods are
    not put back into stock and credit is not touched.
    """

    return_id = models.CharField(max_length=20, unique=True, verbose_name=_('Return ID'))
    order = models.ForeignKey(
        'textileman.Order',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='returns',
        verbose_name=_('Order'),
    )
    customer = models.CharField(max_length=200, db_index=True, verbose_name=_('Customer'))
    product = models.CharField(max_length=200, verbose_name=_('Product'))
    color = models.CharField(max_length=50, verbose_name=_('Color'))
    quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Quantity'))
    reason = models.TextField(verbose_name=_('Reason'))
    is_approved = models.BooleanField(default=False, verbose_name=_('Approved'))
    is_rejected = models.BooleanField(default=False, verbose_name=_('Rejected'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Return request')
        verbose_name_plural = _('Return requests')
        ordering = ['-created_at', '-id']

    @property
    def is_resolved(self) -> bool:
        return self.is_approved or self.is_rejected

    @classmethod
    def next_return_id(cls) -> str:
        """Next sequential id: RET-001, RET-002, ..."""
        highest = cls.objects.filter(return_id__regex=rf'^{RETURN_ID_PREFIX}[0-9]+$').aggregate(
            n=Coalesce(Max(Cast(Substr('return_id', len(RETURN_ID_PREFIX) + 1), IntegerField())), 0)
        )['n']
        return f"{RETURN_ID_PREFIX}{highest + 1:03d}"

    def __str__(self) -> str:
        return self.return_id
