"""
Core models, numerical primitives and invariants of the projection engine.

Contains the building blocks shared by every projection family: ellipsoids,
datums, parameter sets, angle parsing and the guarded series/solvers.
Nothing here depends on a concrete projection family.
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
