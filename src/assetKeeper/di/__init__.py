from .container import Container, Registration, Scope
from .lifetime import Lifetime

__all__ = [
    "Container",
    "Lifetime",
    "Registration",
    "Scope",
]
