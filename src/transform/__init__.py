"""
Batch coordinate transformation between projections.
"""

import logging

from src.transform.transformer import (
    Transformer,
    TransformerConfig,
    geocentric_from_wgs84,
    geocentric_to_wgs84,
    transform,
    transform_point,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Transformer",
    "TransformerConfig",
    "geocentric_to_wgs84",
    "geocentric_from_wgs84",
    "transform",
    "transform_point",
]
