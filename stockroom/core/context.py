"""
Acting-principal context threaded into every write that needs attribution.
"""
from dataclasses import dataclass
from typing import Optional


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


@dataclass(frozen=True)
class SessionContext:
    """The authenticated user and client address behind an operation"""
    user: Optional[object] = None
    ip_address: Optional[str] = None

    @property
    def user_id(self):
        if self.user is not None and getattr(self.user, 'is_authenticated', False):
            return self.user.pk
        return None

    @classmethod
    def from_request(cls, request):
        user = getattr(request, 'user', None)
        if user is not None and not user.is_authenticated:
            user = None
        return cls(user=user, ip_address=get_client_ip(request))
