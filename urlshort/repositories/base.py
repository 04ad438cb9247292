"""Repository exceptions for the URL shortener application.

The service layer translates these into domain errors; they never reach
the API layer.
"""

from typing import Any, Type


class RepositoryError(Exception):
    """Base exception for repository errors."""
    pass


class EntityNotFoundError(RepositoryError):
    """Exception raised when an entity cannot be found."""

    def __init__(self, model_type: Type, key: Any):
        self.model_type = model_type
        self.key = key
        model_name = getattr(model_type, "__name__", "Entity")
        super().__init__(f"{model_name} with key {key} not found")


class EntityExpiredError(RepositoryError):
    """Exception raised when an entity was found expired and evicted."""

    def __init__(self, model_type: Type, key: Any):
        self.model_type = model_type
        self.key = key
        model_name = getattr(model_type, "__name__", "Entity")
        super().__init__(f"{model_name} with key {key} has expired")


class DuplicateEntityError(RepositoryError):
    """Exception raised when a unique key is already taken."""

    def __init__(self, model_type: Type, field_name: str, value: Any):
        self.model_type = model_type
        self.field_name = field_name
        self.value = value
        model_name = getattr(model_type, "__name__", "Entity")
        super().__init__(f"{model_name} with {field_name}={value} already exists")
