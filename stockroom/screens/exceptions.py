"""
Failures a screen reports to the user.

Every operation catches these at its boundary and turns them into a toast;
none is retried and none leaves the screen unusable.
"""
from stockroom.core import toasts


class CollaboratorError(Exception):
    """The database rejected or failed an operation"""


class FormValidationError(Exception):
    """A required field is missing or a numeric field is not a number"""

    def __init__(self, errors):
        self.errors = dict(errors)
        super().__init__('; '.join(f"{field}: {message}" for field, message in self.errors.items()))


class ScreenError(Exception):
    title = "Error"

    def __init__(self, message=''):
        self.message = message
        super().__init__(message)

    def toast(self):
        return toasts.error(self.message or self.title, title=self.title)


class LoadFailed(ScreenError):
    title = "Error loading data"


class AddFailed(ScreenError):
    title = "Error adding record"


class EditFailed(ScreenError):
    title = "Error updating record"


class DeleteFailed(ScreenError):
    title = "Error deleting record"


class FilterRejected(ScreenError):
    title = "Invalid filter"


class FilterFailed(ScreenError):
    title = "Error applying filter"
