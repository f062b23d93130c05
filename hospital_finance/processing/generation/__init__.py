"""
Generation module: bounded variation, invariant enforcement and record assembly.
"""

from .assembler import DatasetAssembler, ScaleFactors
from .invariants import InvariantEnforcer
from .variation import VariationGenerator

__all__ = [
    'DatasetAssembler',
    'InvariantEnforcer',
    'ScaleFactors',
    'VariationGenerator',
]
