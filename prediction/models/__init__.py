# Export all prediction models for easy imports
from .base import Base
from .college import College

__all__ = [
    "Base",
    "College",
]
