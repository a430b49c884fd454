"""Database utilities for the durable gallery store."""

from . import models
from .database import Base, Database

__all__ = ["models", "Base", "Database"]
