"""
Accompaniment Service

Selection rules for product modifiers and their extra charges.
"""

import logging
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List

from django.db.models import Sum

from ..exceptions import InvalidOperationError
from ..models import Accompaniment, AccompanimentGroup

logger = logging.getLogger(__name__)


@dataclass
class SelectionResult:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)

    def add_error(self, message: str):
        self.is_valid = False
        self.errors.append(message)


def normalize_ids(ids: Iterable) -> List[str]:
    """Canonical string ids, duplicates dropped, order kept."""
    seen = []
    for value in ids or []:
        try:
            key = str(uuid.UUID(str(value)))
        except ValueError:
            raise InvalidOperationError(f"Invalid accompaniment id: {value}")
        if key not in seen:
            seen.append(key)
    return seen


class AccompanimentService:
    """Validation and pricing of accompaniment selections."""

    @staticmethod
    def validate_selection(product_id, selected_accompaniment_ids) -> SelectionResult:
        """
        Check a selection against every accompaniment group of a product.

        All violations are collected rather than stopping at the first one.
        A product without groups accepts any selection.
        """
        result = SelectionResult()
        selected = normalize_ids(selected_accompaniment_ids)

        groups = AccompanimentGroup.objects.filter(
            product_id=product_id,
        ).prefetch_related('accompaniments')

        for group in groups:
            in_group = [a for a in group.accompaniments.all() if str(a.id) in selected]

            if group.is_required and not in_group:
                result.add_error(f"'{group.name}' is required")
                continue

            count = len(in_group)
            if group.min_selections is not None and count < group.min_selections:
                result.add_error(
                    f"'{group.name}' requires at least {group.min_selections} selections"
                )
            limit = group.effective_max
            if limit is not None and count > limit:
                if group.selection_type == AccompanimentGroup.SelectionType.SINGLE:
                    result.add_error(f"'{group.name}' allows only one selection")
                else:
                    result.add_error(f"'{group.name}' allows at most {limit} selections")

            unavailable = [a.name for a in in_group if not a.is_available]
            if unavailable:
                result.add_error(
                    f"Not available in '{group.name}': {', '.join(unavailable)}"
                )

        if not result.is_valid:
            logger.warning(
                "Accompaniment validation failed for product %s: %s",
                product_id, '; '.join(result.errors),
            )
        return result

    @staticmethod
    def calculate_total_extra_charges(accompaniment_ids) -> Decimal:
        ids = normalize_ids(accompaniment_ids)
        if not ids:
            return Decimal('0.00')
        total = Accompaniment.objects.filter(
            id__in=ids,
        ).aggregate(total=Sum('extra_charge'))['total']
        return total or Decimal('0.00')

    @staticmethod
    def get_for_product(product, accompaniment_ids) -> List[Accompaniment]:
        """Accompaniments of ``product`` matching the ids, in selection order."""
        ids = normalize_ids(accompaniment_ids)
        if not ids:
            return []
        found = {
            str(a.id): a
            for a in Accompaniment.objects.filter(id__in=ids, group__product=product)
        }
        return [found[i] for i in ids if i in found]
