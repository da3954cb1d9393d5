from .auth import User, Role
from .inventory import Sweet

__all__ = [
    'User', 'Role',
    'Sweet',
]
