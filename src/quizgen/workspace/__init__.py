"""Workspace bootstrap command (``quizgen init``)."""
