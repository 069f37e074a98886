"""
Data access behind the screens.

A collaborator performs the reads and writes a screen asks for and returns
plain row dicts. Every failure comes back as CollaboratorError.
"""
import logging

from asgiref.sync import sync_to_async
from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db import DatabaseError, transaction

from .exceptions import CollaboratorError

logger = logging.getLogger(__name__)


def _format_errors(errors):
    parts = []
    for field, messages in errors.items():
        if isinstance(messages, (list, tuple)):
            messages = ' '.join(str(m) for m in messages)
        parts.append(f"{field}: {messages}")
    return '; '.join(parts)


class DataCollaborator:
    """Interface the ScreenController depends on"""

    async def select(self, schema, named_filter=None, params=None):
        raise NotImplementedError

    async def insert(self, schema, values):
        raise NotImplementedError

    async def update(self, schema, pk, values):
        raise NotImplementedError

    async def delete(self, schema, pk):
        raise NotImplementedError


class OrmCollaborator(DataCollaborator):
    """Collaborator backed by the Django ORM and the screen's DRF serializer"""

    async def select(self, schema, named_filter=None, params=None):
        return await sync_to_async(self._select)(schema, named_filter, params)

    async def insert(self, schema, values):
        return await sync_to_async(self._insert)(schema, values)

    async def update(self, schema, pk, values):
        return await sync_to_async(self._update)(schema, pk, values)

    async def delete(self, schema, pk):
        return await sync_to_async(self._delete)(schema, pk)

    def _queryset(self, schema):
        queryset = schema.model.objects.all()
        if schema.select_related:
            queryset = queryset.select_related(*schema.select_related)
        return queryset

    def _get(self, schema, pk):
        try:
            return self._queryset(schema).get(pk=pk)
        except (ObjectDoesNotExist, ValidationError, ValueError):
            raise CollaboratorError(f"No {schema.entity.lower()} found with {schema.pk} {pk}")

    def _row(self, schema, instance):
        return dict(schema.serializer_class(instance).data)

    def _select(self, schema, named_filter, params):
        queryset = self._queryset(schema)
        if named_filter is not None:
            queryset = named_filter.apply(queryset, params or {})
        try:
            return [dict(row) for row in schema.serializer_class(queryset, many=True).data]
        except DatabaseError as e:
            logger.error(f"Error fetching {schema.table}: {str(e)}")
            raise CollaboratorError(str(e)) from e

    def _insert(self, schema, values):
        serializer = schema.serializer_class(data=values)
        if not serializer.is_valid():
            raise CollaboratorError(_format_errors(serializer.errors))
        try:
            with transaction.atomic():
                instance = serializer.save()
        except DatabaseError as e:
            logger.error(f"Error inserting into {schema.table}: {str(e)}")
            raise CollaboratorError(str(e)) from e
        return [self._row(schema, self._get(schema, instance.pk))]

    def _update(self, schema, pk, values):
        instance = self._get(schema, pk)
        serializer = schema.serializer_class(instance, data=values, partial=True)
        if not serializer.is_valid():
            raise CollaboratorError(_format_errors(serializer.errors))
        try:
            with transaction.atomic():
                serializer.save()
        except DatabaseError as e:
            logger.error(f"Error updating {schema.table} {pk}: {str(e)}")
            raise CollaboratorError(str(e)) from e
        return self._row(schema, self._get(schema, pk))

    def _delete(self, schema, pk):
        instance = self._get(schema, pk)
        try:
            instance.delete()
        except DatabaseError as e:
            logger.error(f"Error deleting from {schema.table} {pk}: {str(e)}")
            raise CollaboratorError(str(e)) from e
        return pk
