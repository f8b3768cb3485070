"""
Donor Registry Package

A package for unifying donor records collected by several intake units into
one deduplicated registry and for finding genetically compatible donors.
"""

__version__ = '0.1.0'

from .registry import DonorRegistry
from .utils.records import Person, create_patient

__all__ = ['DonorRegistry', 'Person', 'create_patient']
