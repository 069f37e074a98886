"""
Per-screen configuration.

Every admin screen (Inventory, Customers, Orders, Shipping, Suppliers) has
the same shape; an EntitySchema captures what differs between them so one
controller can serve all five.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional, Tuple

from stockroom.catalog.models import Product
from stockroom.catalog.serializers import ProductSerializer
from stockroom.orders.models import Order
from stockroom.orders.serializers import OrderSerializer
from stockroom.parties.models import Customer, Supplier
from stockroom.parties.serializers import CustomerSerializer, SupplierSerializer
from stockroom.querylog.entries import Join
from stockroom.shipping.models import Shipment
from stockroom.shipping.serializers import ShipmentSerializer
from .exceptions import FormValidationError
from .filters import CUSTOMER_FILTERS, ORDER_FILTERS, PRODUCT_FILTERS

INT = 'int'
DECIMAL = 'decimal'


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _coerce(kind, value):
    if kind == INT:
        if isinstance(value, bool):
            raise ValueError
        if isinstance(value, float) and not value.is_integer():
            raise ValueError
        return int(str(value).strip()) if isinstance(value, str) else int(value)
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError


@dataclass(frozen=True)
class EntitySchema:
    key: str
    title: str
    entity: str
    plural: str
    model: type
    serializer_class: type
    form_fields: Tuple[str, ...]
    required_fields: Tuple[str, ...]
    editable_fields: Tuple[str, ...]
    numeric_fields: Dict[str, str]
    join: Optional[Join] = None
    select_related: Tuple[str, ...] = ()
    named_filters: Tuple = ()
    # Set to the acting user on add
    owner_field: Optional[str] = None

    @property
    def table(self):
        return self.model._meta.db_table

    @property
    def pk(self):
        return self.model._meta.pk.name

    @property
    def filterable(self):
        return bool(self.named_filters)

    def column(self, field_name):
        return self.model._meta.get_field(field_name).column

    def columns(self, values):
        """Field values keyed by database column, for the query log"""
        return {self.column(name): value for name, value in values.items()}

    def get_filter(self, name):
        for named in self.named_filters:
            if named.name == name:
                return named
        return None

    def clean_form(self, form, fields=None, partial=False):
        """
        Presence check and number coercion of a submitted form.

        Only `fields` (default: the add form's fields) are taken from the
        form. Blank optional values are dropped. With `partial`, a required
        field may be left out but not blanked.
        """
        fields = self.form_fields if fields is None else fields
        form = form or {}
        errors = {}
        values = {}
        for name in fields:
            present = name in form
            value = form.get(name)
            if _is_blank(value):
                if name in self.required_fields and (present or not partial):
                    errors[name] = "This field is required."
                continue
            if name in self.numeric_fields:
                try:
                    value = _coerce(self.numeric_fields[name], value)
                except (TypeError, ValueError):
                    errors[name] = "A valid number is required."
                    continue
            values[name] = value.strip() if isinstance(value, str) else value
        if errors:
            raise FormValidationError(errors)
        return values

    def as_dict(self):
        return {
            'key': self.key,
            'title': self.title,
            'entity': self.entity,
            'primary_key': self.pk,
            'form_fields': list(self.form_fields),
            'required_fields': list(self.required_fields),
            'editable_fields': list(self.editable_fields),
            'filterable': self.filterable,
            'filters': [named.as_dict() for named in self.named_filters],
        }


INVENTORY = EntitySchema(
    key='inventory',
    title='Inventory',
    entity='Product',
    plural='Products',
    model=Product,
    serializer_class=ProductSerializer,
    form_fields=('sku', 'product_name', 'category', 'price', 'stock', 'status'),
    required_fields=('sku', 'product_name', 'category', 'price', 'stock'),
    editable_fields=('product_name', 'category', 'price', 'stock', 'status'),
    numeric_fields={'price': DECIMAL, 'stock': INT},
    named_filters=PRODUCT_FILTERS,
)

CUSTOMERS = EntitySchema(
    key='customers',
    title='Customers',
    entity='Customer',
    plural='Customers',
    model=Customer,
    serializer_class=CustomerSerializer,
    form_fields=('customer_name', 'contact', 'type', 'status'),
    required_fields=('customer_name', 'contact'),
    editable_fields=('customer_name', 'contact', 'type', 'status'),
    numeric_fields={},
    named_filters=CUSTOMER_FILTERS,
)

ORDERS = EntitySchema(
    key='orders',
    title='Orders',
    entity='Order',
    plural='Orders',
    model=Order,
    serializer_class=OrderSerializer,
    form_fields=('customer', 'status', 'total_amount'),
    required_fields=('customer', 'total_amount'),
    editable_fields=('status', 'total_amount'),
    numeric_fields={'total_amount': DECIMAL},
    join=Join('customers', 'customer_id', 'customer_id', ('customer_name',)),
    select_related=('customer',),
    named_filters=ORDER_FILTERS,
    owner_field='admin',
)

SHIPPING = EntitySchema(
    key='shipping',
    title='Shipping',
    entity='Shipment',
    plural='Shipments',
    model=Shipment,
    serializer_class=ShipmentSerializer,
    form_fields=(
        'order', 'courier_service', 'shipping_address', 'tracking_number',
        'estimated_delivery_date', 'status',
    ),
    required_fields=('courier_service', 'shipping_address'),
    editable_fields=(
        'courier_service', 'shipping_address', 'tracking_number',
        'estimated_delivery_date', 'status',
    ),
    numeric_fields={},
    join=Join('orders', 'order_id', 'order_id', ('order_id',)),
    select_related=('order',),
)

SUPPLIERS = EntitySchema(
    key='suppliers',
    title='Suppliers',
    entity='Supplier',
    plural='Suppliers',
    model=Supplier,
    serializer_class=SupplierSerializer,
    form_fields=('supplier_name', 'contact', 'address', 'status'),
    required_fields=('supplier_name', 'contact', 'address'),
    editable_fields=('supplier_name', 'contact', 'address', 'status'),
    numeric_fields={},
)

SCREENS = {schema.key: schema for schema in (INVENTORY, CUSTOMERS, ORDERS, SHIPPING, SUPPLIERS)}


def get_screen(key):
    return SCREENS.get(key)
