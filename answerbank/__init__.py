"""Answerbank: a versioned library of interview responses with AI feedback."""

__version__ = "1.0.0"
