"""
Utility modules for the Donor Registry package.

This package contains utility functions for record parsing, unification,
compatibility scoring, I/O operations and visualizations.
"""

__all__ = ['records', 'merge', 'similarity', 'io', 'visualization']
