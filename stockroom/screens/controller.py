"""
The admin screen controller.

One ScreenController drives one mounted screen: it fetches rows, runs the
add/edit/delete flows and the filter box, records every data-access
operation in the screen's query log before issuing it, and reports
failures as toasts.
"""
import logging
import time
from enum import Enum

from stockroom.core import toasts
from stockroom.core.context import SessionContext
from stockroom.core.utils import acreate_activity_log
from stockroom.querylog.entries import QueryOperation
from stockroom.querylog.store import QueryLogStore
from stockroom.querylog.viewer import QueryLogViewer
from .exceptions import (
    AddFailed, CollaboratorError, DeleteFailed, EditFailed, FilterFailed,
    FilterRejected, FormValidationError, LoadFailed,
)
from .filters import is_select_statement

logger = logging.getLogger(__name__)

CUSTOM_FILTER = "Custom Filter"
ADD_MODAL = 'add'
EDIT_MODAL = 'edit'


class ScreenState(Enum):
    IDLE = 'idle'
    LOADING = 'loading'
    LOADED = 'loaded'
    LOAD_ERROR = 'load_error'
    ADD_PENDING = 'add_pending'
    EDIT_PENDING = 'edit_pending'
    DELETE_PENDING = 'delete_pending'
    FILTER_PENDING = 'filter_pending'


class ScreenController:

    def __init__(self, schema, collaborator, context=None, query_log=None, clipboard=None):
        self.schema = schema
        self.collaborator = collaborator
        self.context = context if context is not None else SessionContext()
        self.query_log = query_log if query_log is not None else QueryLogStore()
        self.toasts = toasts.ToastQueue()
        self.viewer = QueryLogViewer(self.query_log, clipboard=clipboard, toast_queue=self.toasts)
        self.rows = []
        self.state = ScreenState.IDLE
        self.error_message = None
        self.last_error = None
        self.modal = None
        self.editing_pk = None
        self.form = {}
        self.confirm_delete_pk = None
        self.active_filter = None
        self.mounted = False
        self._settled = ScreenState.IDLE
        self._generation = 0
        self._fetch_ticket = 0

    # Bookkeeping

    def _is_current(self, generation, ticket=None):
        if not self.mounted or generation != self._generation:
            return False
        return ticket is None or ticket == self._fetch_ticket

    def _settle(self):
        self.state = self._settled

    def _fail(self, error):
        logger.error(f"[{self.schema.key}] {error.title}: {error.message}")
        self.last_error = error
        self.toasts.push(error.toast())

    def _find_row(self, pk):
        key = str(pk)
        for index, row in enumerate(self.rows):
            if str(row.get(self.schema.pk)) == key:
                return index
        return None

    async def _issue(self, operation, source, call):
        """Log `operation`, then await `call`; the entry gets the measured duration"""
        entry = self.query_log.append(operation, source)
        started = time.perf_counter()
        try:
            return await call()
        finally:
            self.query_log.record_duration(entry, (time.perf_counter() - started) * 1000)

    # Loading

    async def mount(self):
        self.mounted = True
        return await self.refresh()

    async def refresh(self):
        schema = self.schema
        generation = self._generation
        self._fetch_ticket += 1
        ticket = self._fetch_ticket
        self.state = ScreenState.LOADING
        operation = QueryOperation.select(schema.table, join=schema.join)
        try:
            rows = await self._issue(operation, f"Fetch {schema.plural}", lambda: self.collaborator.select(schema))
        except CollaboratorError as e:
            if not self._is_current(generation, ticket):
                return False
            self.error_message = str(e) or f"Failed to load {schema.plural.lower()}"
            self.state = self._settled = ScreenState.LOAD_ERROR
            self._fail(LoadFailed(self.error_message))
            return False
        if not self._is_current(generation, ticket):
            logger.debug(f"[{schema.key}] Dropping stale fetch result")
            return False
        self.rows = list(rows)
        self.error_message = None
        self.active_filter = None
        self.state = self._settled = ScreenState.LOADED
        return True

    # Modal

    def open_add(self):
        self.modal = ADD_MODAL
        self.editing_pk = None
        self.form = {}

    def open_edit(self, pk):
        index = self._find_row(pk)
        if index is None:
            return False
        row = self.rows[index]
        self.modal = EDIT_MODAL
        self.editing_pk = row[self.schema.pk]
        self.form = {name: row.get(name) for name in self.schema.editable_fields}
        return True

    def close_modal(self):
        self.modal = None
        self.editing_pk = None
        self.form = {}

    # Writes

    async def add(self, form=None):
        schema = self.schema
        form = dict(self.form if form is None else form)
        self.form = form
        try:
            values = schema.clean_form(form)
        except FormValidationError as e:
            self.toasts.push(toasts.error(str(e), title="Validation error"))
            return False
        if schema.owner_field and self.context.user_id is not None:
            values[schema.owner_field] = self.context.user_id

        generation = self._generation
        self.state = ScreenState.ADD_PENDING
        operation = QueryOperation.insert(schema.table, schema.columns(values))
        try:
            rows = await self._issue(operation, f"Add {schema.entity}", lambda: self.collaborator.insert(schema, values))
        except CollaboratorError as e:
            if self._is_current(generation):
                self._settle()
                self._fail(AddFailed(str(e)))
            return False
        if not self._is_current(generation):
            return False

        rows = list(rows)
        self.rows = rows + self.rows
        self.close_modal()
        self._settle()
        self.toasts.push(toasts.success(f"{schema.entity} added", f"{schema.entity} has been added successfully"))
        if rows:
            await acreate_activity_log(
                self.context, 'create', schema.table, rows[0].get(schema.pk), {'values': values},
            )
        return True

    async def edit(self, pk=None, form=None):
        schema = self.schema
        pk = self.editing_pk if pk is None else pk
        form = dict(self.form if form is None else form)
        self.form = form
        try:
            values = schema.clean_form(form, schema.editable_fields, partial=True)
        except FormValidationError as e:
            self.toasts.push(toasts.error(str(e), title="Validation error"))
            return False

        generation = self._generation
        self.state = ScreenState.EDIT_PENDING
        operation = QueryOperation.update(schema.table, schema.column(schema.pk), pk, schema.columns(values))
        try:
            row = await self._issue(operation, f"Edit {schema.entity}", lambda: self.collaborator.update(schema, pk, values))
        except CollaboratorError as e:
            if self._is_current(generation):
                self._settle()
                self._fail(EditFailed(str(e)))
            return False
        if not self._is_current(generation):
            return False

        index = self._find_row(pk)
        if index is not None:
            self.rows[index] = row
        self.close_modal()
        self._settle()
        self.toasts.push(toasts.success(f"{schema.entity} updated", f"{schema.entity} has been updated successfully"))
        await acreate_activity_log(self.context, 'update', schema.table, pk, {'changes': values})
        return True

    def request_delete(self, pk):
        """First step of a delete: remember which row awaits confirmation"""
        if self._find_row(pk) is None:
            return False
        self.confirm_delete_pk = pk
        return True

    def cancel_delete(self):
        self.confirm_delete_pk = None

    async def delete(self, pk, confirmed=False):
        if not confirmed:
            self.confirm_delete_pk = pk
            return False
        schema = self.schema
        self.confirm_delete_pk = None
        generation = self._generation
        self.state = ScreenState.DELETE_PENDING
        operation = QueryOperation.delete(schema.table, schema.column(schema.pk), pk)
        try:
            await self._issue(operation, f"Delete {schema.entity}", lambda: self.collaborator.delete(schema, pk))
        except CollaboratorError as e:
            if self._is_current(generation):
                self._settle()
                self._fail(DeleteFailed(str(e)))
            return False
        if not self._is_current(generation):
            return False

        index = self._find_row(pk)
        if index is not None:
            del self.rows[index]
        self._settle()
        self.toasts.push(toasts.success(f"{schema.entity} deleted", f"{schema.entity} has been deleted successfully"))
        await acreate_activity_log(self.context, 'delete', schema.table, pk, {})
        return True

    # Filtering

    async def apply_filter(self, name=None, params=None, text=None):
        """
        Narrow the rows with one of the screen's named filters, or with the
        free-text box.

        Free text is logged as entered and checked to read as a SELECT; it is
        never executed. When it passes the check the screen reloads its
        regular fetch and says so.
        """
        schema = self.schema
        if not schema.filterable:
            self._fail(FilterRejected(f"{schema.title} does not support filters"))
            return False

        if name is not None:
            named = schema.get_filter(name)
            if named is None:
                self._fail(FilterRejected(f"Unknown filter '{name}'"))
                return False
            try:
                cleaned = named.clean(params)
            except FilterRejected as e:
                self._fail(e)
                return False
            operation = QueryOperation.select(
                schema.table, join=schema.join, conditions=named.conditions(cleaned), filter_name=name,
            )
            source = CUSTOM_FILTER

            def call():
                return self.collaborator.select(schema, named, cleaned)
        else:
            text = '' if text is None else str(text)
            self.query_log.append(QueryOperation.raw(text), CUSTOM_FILTER)
            if not is_select_statement(text):
                self._fail(FilterRejected("Only SELECT queries are allowed"))
                return False
            named = None
            operation = QueryOperation.select(schema.table, join=schema.join)
            source = f"Fetch {schema.plural}"

            def call():
                return self.collaborator.select(schema)

        generation = self._generation
        self._fetch_ticket += 1
        ticket = self._fetch_ticket
        self.state = ScreenState.FILTER_PENDING
        try:
            rows = await self._issue(operation, source, call)
        except CollaboratorError as e:
            if self._is_current(generation, ticket):
                self._settle()
                self._fail(FilterFailed(str(e)))
            return False
        if not self._is_current(generation, ticket):
            return False

        self.rows = list(rows)
        self.error_message = None
        self.active_filter = named.name if named else None
        self.state = self._settled = ScreenState.LOADED
        if named:
            self.toasts.push(toasts.success("Filter applied", f"{named.label}: {len(self.rows)} {schema.plural.lower()}"))
        else:
            self.toasts.push(toasts.success(
                "Filter applied",
                f"Free-text queries are not executed; showing all {schema.plural.lower()}",
            ))
        return True

    # Lifecycle

    def unmount(self):
        """Mark the screen gone; results of operations still in flight are dropped"""
        self.mounted = False
        self._generation += 1
        self.viewer.close()

    def snapshot(self):
        return {
            'screen': self.schema.as_dict(),
            'state': self.state.value,
            'mounted': self.mounted,
            'rows': self.rows,
            'count': len(self.rows),
            'error_message': self.error_message,
            'modal': self.modal,
            'editing_pk': self.editing_pk,
            'form': self.form,
            'confirm_delete_pk': self.confirm_delete_pk,
            'active_filter': self.active_filter,
            'query_log': self.viewer.as_dict(),
        }
