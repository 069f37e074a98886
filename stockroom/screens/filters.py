"""
Named, parameterized filters for the Inventory, Customers and Orders screens.

Each screen offers a fixed set of filters. A filter is a django-filter
FilterSet plus the subset of its parameters the filter accepts; user input
only ever becomes FilterSet parameters, never query text.
"""
import django_filters
from django.db.models import Q

from stockroom.catalog.models import Product
from stockroom.orders.models import Order
from stockroom.parties.models import Customer
from stockroom.querylog.entries import Condition
from .exceptions import FilterRejected

LOOKUP_OPERATORS = {
    'exact': '=',
    'iexact': '=',
    'lt': '<',
    'lte': '<=',
    'gt': '>',
    'gte': '>=',
    'icontains': 'ILIKE',
    'contains': 'LIKE',
}


def is_select_statement(text):
    """Client-side guard for free-text filters: must read as a SELECT"""
    return (text or '').strip().lower().startswith('select')


class ProductFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search', label='Search')
    category = django_filters.CharFilter(field_name='category', lookup_expr='iexact')
    status = django_filters.ChoiceFilter(field_name='status', choices=Product.STATUS_CHOICES)
    max_stock = django_filters.NumberFilter(field_name='stock', lookup_expr='lte')
    min_price = django_filters.NumberFilter(field_name='price', lookup_expr='gte')
    max_price = django_filters.NumberFilter(field_name='price', lookup_expr='lte')

    class Meta:
        model = Product
        fields = []

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(product_name__icontains=value) |
            Q(sku__icontains=value) |
            Q(category__icontains=value)
        )


class CustomerFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search', label='Search')
    type = django_filters.ChoiceFilter(field_name='type', choices=Customer.TYPE_CHOICES)
    status = django_filters.ChoiceFilter(field_name='status', choices=Customer.STATUS_CHOICES)
    min_spent = django_filters.NumberFilter(field_name='total_spent', lookup_expr='gte')

    class Meta:
        model = Customer
        fields = []

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(customer_name__icontains=value) | Q(contact__icontains=value))


class OrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(field_name='status', choices=Order.STATUS_CHOICES)
    date_from = django_filters.DateFilter(field_name='order_date', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='order_date', lookup_expr='date__lte')
    min_total = django_filters.NumberFilter(field_name='total_amount', lookup_expr='gte')
    customer = django_filters.CharFilter(field_name='customer__customer_name', lookup_expr='icontains')

    class Meta:
        model = Order
        fields = []


class NamedFilter:
    """One entry of a screen's filter menu"""

    def __init__(self, name, label, filterset_class, params, required=(), defaults=None):
        self.name = name
        self.label = label
        self.filterset_class = filterset_class
        self.params = tuple(params)
        self.required = tuple(required)
        self.defaults = dict(defaults or {})

    def clean(self, params):
        """Validated parameters for this filter, or FilterRejected"""
        merged = {**self.defaults, **{k: v for k, v in (params or {}).items() if v not in (None, '')}}
        unknown = sorted(set(merged) - set(self.params))
        if unknown:
            raise FilterRejected(f"Filter '{self.name}' does not accept: {', '.join(unknown)}")
        missing = [p for p in self.required if p not in merged]
        if missing:
            raise FilterRejected(f"Filter '{self.name}' requires: {', '.join(missing)}")
        model = self.filterset_class._meta.model
        filterset = self.filterset_class(data=merged, queryset=model.objects.none())
        if not filterset.is_valid():
            errors = '; '.join(
                f"{field}: {' '.join(str(m) for m in messages)}"
                for field, messages in filterset.errors.items()
            )
            raise FilterRejected(f"Filter '{self.name}' rejected: {errors}")
        return {key: filterset.form.cleaned_data[key] for key in merged}

    def conditions(self, cleaned):
        """Display conditions for the query log"""
        result = []
        for key, value in cleaned.items():
            declared = self.filterset_class.base_filters[key]
            if getattr(declared, 'method', None):
                result.append(Condition(key, 'MATCHES', value))
                continue
            lookup = declared.lookup_expr.split('__')[-1]
            *path, column = declared.field_name.split('__')
            table = None
            if path:
                model = self.filterset_class._meta.model
                for name in path:
                    model = model._meta.get_field(name).related_model
                table = model._meta.db_table
            operator = LOOKUP_OPERATORS.get(lookup, '=')
            if operator in ('ILIKE', 'LIKE'):
                value = f"%{value}%"
            result.append(Condition(column, operator, value, table))
        return result

    def apply(self, queryset, cleaned):
        filterset = self.filterset_class(data=cleaned, queryset=queryset)
        return filterset.qs

    def as_dict(self):
        return {
            'name': self.name,
            'label': self.label,
            'params': list(self.params),
            'required': list(self.required),
            'defaults': self.defaults,
        }


PRODUCT_FILTERS = (
    NamedFilter('search', 'Search products', ProductFilter, ['search'], required=['search']),
    NamedFilter('low_stock', 'Low stock', ProductFilter, ['max_stock'], defaults={'max_stock': 10}),
    NamedFilter('category', 'By category', ProductFilter, ['category'], required=['category']),
    NamedFilter('status', 'By status', ProductFilter, ['status'], required=['status']),
    NamedFilter('price_range', 'Price range', ProductFilter, ['min_price', 'max_price']),
)

CUSTOMER_FILTERS = (
    NamedFilter('search', 'Search customers', CustomerFilter, ['search'], required=['search']),
    NamedFilter('type', 'By type', CustomerFilter, ['type'], required=['type']),
    NamedFilter('status', 'By status', CustomerFilter, ['status'], required=['status']),
    NamedFilter('top_spenders', 'Top spenders', CustomerFilter, ['min_spent'], defaults={'min_spent': 1000}),
)

ORDER_FILTERS = (
    NamedFilter('status', 'By status', OrderFilter, ['status'], required=['status']),
    NamedFilter('placed_between', 'Placed between', OrderFilter, ['date_from', 'date_to']),
    NamedFilter('min_total', 'Minimum total', OrderFilter, ['min_total'], required=['min_total']),
    NamedFilter('customer', 'By customer', OrderFilter, ['customer'], required=['customer']),
)
