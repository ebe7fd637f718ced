"""
Layer generators for the Clean Architecture project layout.
"""

from .domain import DomainGenerator
from .dto import DTOGenerator
from .handler import HandlerGenerator
from .messages import MessagesGenerator
from .repository import RepositoryGenerator

__all__ = [
    "DomainGenerator",
    "DTOGenerator",
    "HandlerGenerator",
    "MessagesGenerator",
    "RepositoryGenerator",
]
