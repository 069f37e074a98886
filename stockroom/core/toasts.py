"""
Transient user-facing notifications returned alongside API responses
"""
from dataclasses import asdict, dataclass
from typing import Optional

DEFAULT = 'default'
DESTRUCTIVE = 'destructive'


@dataclass(frozen=True)
class Toast:
    title: str
    description: str = ''
    variant: str = DEFAULT
    duration: Optional[int] = None

    @property
    def is_destructive(self):
        return self.variant == DESTRUCTIVE

    def as_dict(self):
        return asdict(self)


def success(title, description=''):
    return Toast(title=title, description=description)


def error(description, title='Error'):
    return Toast(title=title, description=description, variant=DESTRUCTIVE)


class ToastQueue:
    """FIFO of toasts raised by a screen, drained when a response is built"""

    def __init__(self):
        self._pending = []

    def push(self, toast):
        self._pending.append(toast)
        return toast

    def drain(self):
        pending, self._pending = self._pending, []
        return pending

    def peek(self):
        return list(self._pending)

    def __len__(self):
        return len(self._pending)
