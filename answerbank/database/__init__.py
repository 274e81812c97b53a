"""
Database package for the Answerbank application.

Sessions and engine live in answerbank.database.connection.
"""
from . import models
from .models import Base

__all__ = ["Base", "models"]
