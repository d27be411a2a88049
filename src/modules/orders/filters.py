import django_filters

from modules.core.filters import LookupFilterSet
from modules.orders.models import Order


class OrderFilter(LookupFilterSet):
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")
    user = django_filters.NumberFilter(field_name="user_id", lookup_expr="exact")
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    min_total = django_filters.NumberFilter(field_name="grand_total", lookup_expr="gte")
    max_total = django_filters.NumberFilter(field_name="grand_total", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status", "user", "start_date", "end_date", "min_total", "max_total"]
