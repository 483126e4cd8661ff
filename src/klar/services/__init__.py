"""
Services module for Klar.

Provides the exercise generation and review workflows.
"""

from klar.services.exercise_service import ExerciseService

__all__ = [
    'ExerciseService',
]
