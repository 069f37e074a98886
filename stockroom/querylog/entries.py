"""
Query log records.

An entry stores the operation a screen is about to issue as structured data
(kind, table, field values, conditions). The SQL-like description shown in
the viewer is rendered from that structure when it is read; it is never fed
back into anything that executes.
"""
import datetime
import uuid
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional, Tuple

from django.utils import timezone

SELECT = 'select'
INSERT = 'insert'
UPDATE = 'update'
DELETE = 'delete'
RAW = 'raw'

OPERATION_KINDS = (SELECT, INSERT, UPDATE, DELETE, RAW)


def sql_literal(value):
    """Display form of a value inside a rendered description"""
    if value is None:
        return 'NULL'
    if isinstance(value, bool):
        return 'TRUE' if value else 'FALSE'
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (datetime.date, datetime.datetime)):
        value = value.isoformat()
    text = str(value).replace("'", "''")
    return f"'{text}'"


@dataclass(frozen=True)
class Join:
    """LEFT JOIN of a related table, for display columns only"""
    table: str
    local_column: str
    remote_column: str
    columns: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Condition:
    column: str
    operator: str
    value: object
    table: Optional[str] = None

    def render(self, qualifier=None):
        # A column on a related table keeps that table's name
        qualifier = self.table or qualifier
        column = f"{qualifier}.{self.column}" if qualifier else self.column
        return f"{column} {self.operator} {sql_literal(self.value)}"


@dataclass(frozen=True)
class QueryOperation:
    """What a screen is about to ask the database for"""
    kind: str
    table: str = ''
    values: Tuple[Tuple[str, object], ...] = ()
    conditions: Tuple[Condition, ...] = ()
    join: Optional[Join] = None
    filter_name: Optional[str] = None
    text: str = ''

    @classmethod
    def select(cls, table, join=None, conditions=(), filter_name=None):
        return cls(kind=SELECT, table=table, join=join, conditions=tuple(conditions), filter_name=filter_name)

    @classmethod
    def insert(cls, table, values):
        return cls(kind=INSERT, table=table, values=tuple((values or {}).items()))

    @classmethod
    def update(cls, table, key_column, key, values):
        return cls(
            kind=UPDATE, table=table,
            values=tuple((values or {}).items()),
            conditions=(Condition(key_column, '=', key),),
        )

    @classmethod
    def delete(cls, table, key_column, key):
        return cls(kind=DELETE, table=table, conditions=(Condition(key_column, '=', key),))

    @classmethod
    def raw(cls, text):
        return cls(kind=RAW, text='' if text is None else str(text))

    def as_mapping(self):
        return dict(self.values)

    def _where(self, qualifier=None):
        if not self.conditions:
            return ''
        clauses = ' AND '.join(c.render(qualifier) for c in self.conditions)
        return f" WHERE {clauses}"

    def render(self):
        if self.kind == RAW:
            return self.text
        if self.kind == SELECT:
            if self.join:
                columns = ', '.join(
                    [f"{self.table}.*"] + [f"{self.join.table}.{c}" for c in self.join.columns]
                )
                sql = (
                    f"SELECT {columns} FROM {self.table} "
                    f"LEFT JOIN {self.join.table} ON "
                    f"{self.table}.{self.join.local_column} = {self.join.table}.{self.join.remote_column}"
                )
                sql += self._where(self.table)
            else:
                sql = f"SELECT * FROM {self.table}" + self._where()
            if self.filter_name:
                sql += f" -- filter: {self.filter_name}"
            return sql
        if self.kind == INSERT:
            columns = ', '.join(name for name, _ in self.values)
            literals = ', '.join(sql_literal(value) for _, value in self.values)
            return f"INSERT INTO {self.table} ({columns}) VALUES ({literals})"
        if self.kind == UPDATE:
            assignments = ', '.join(f"{name} = {sql_literal(value)}" for name, value in self.values)
            return f"UPDATE {self.table} SET {assignments}" + self._where()
        if self.kind == DELETE:
            return f"DELETE FROM {self.table}" + self._where()
        return self.text


@dataclass(frozen=True)
class QueryLogEntry:
    id: str
    timestamp: datetime.datetime
    source: str
    operation: QueryOperation
    duration_ms: Optional[float] = None

    @classmethod
    def create(cls, operation, source, duration_ms=None):
        if not isinstance(operation, QueryOperation):
            operation = QueryOperation.raw(operation)
        return cls(
            id=str(uuid.uuid4()),
            timestamp=timezone.now(),
            source='' if source is None else str(source),
            operation=operation,
            duration_ms=duration_ms,
        )

    @property
    def description(self):
        return self.operation.render()

    def with_duration(self, duration_ms):
        return replace(self, duration_ms=duration_ms)

    def as_dict(self):
        return {
            'id': self.id,
            'timestamp': self.timestamp.isoformat(),
            'source': self.source,
            'kind': self.operation.kind,
            'table': self.operation.table,
            'description': self.description,
            'duration_ms': self.duration_ms,
        }
