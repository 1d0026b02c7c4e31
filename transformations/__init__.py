"""Transformations module - prompt table and catalog."""
from transformations.services import (
    TransformationType,
    DEFAULT_TRANSFORMATION,
    get_prompt,
    list_transformations
)
from transformations.routes import router

__all__ = [
    "TransformationType",
    "DEFAULT_TRANSFORMATION",
    "get_prompt",
    "list_transformations",
    "router"
]
