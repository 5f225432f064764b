"""
Projection contract, factory and concrete projection families.
"""

import logging

from src.projection.base import Projection
from src.projection.factory import (
    ProjectionConfig,
    ProjectionFactory,
    available_families,
    create_projection,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Projection",
    "ProjectionConfig",
    "ProjectionFactory",
    "available_families",
    "create_projection",
]
