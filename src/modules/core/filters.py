"""django-filter helpers.

Views validate query parameters with a FilterSet but hand the resulting
ORM lookups to the service layer, so the queryset is evaluated inside the
repository's persistence boundary instead of in the view.
"""

from __future__ import annotations

from typing import Any, Dict

import django_filters
from rest_framework.exceptions import ValidationError

EMPTY_VALUES = (None, "", [], ())


class LookupFilterSet(django_filters.FilterSet):
    def to_lookups(self) -> Dict[str, Any]:
        """Return ``{"field__lookup": value}`` for every supplied parameter.

        Raises:
            ValidationError: a query parameter failed form validation.
        """
        if not self.is_valid():
            raise ValidationError(self.errors)
        lookups: Dict[str, Any] = {}
        for name, filter_ in self.filters.items():
            value = self.form.cleaned_data.get(name)
            if value in EMPTY_VALUES:
                continue
            lookups[f"{filter_.field_name}__{filter_.lookup_expr}"] = value
        return lookups
