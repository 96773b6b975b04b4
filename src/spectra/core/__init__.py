"""Pure core of the step composition engine.

It provides:
- validation of action steps against the catalog;
- fractional execution order key allocation;
- composition of stored steps into a nested tree.

Nothing in this package touches the store.
"""

from .composer import SharedStepFetcher, compose
from .ordering import allocate, allocate_order, append_key, duplicate_key
from .validator import CleanStep, clean_assertions, clean_parameters, validate_step

__all__ = (
    'CleanStep',
    'SharedStepFetcher',
    'allocate',
    'allocate_order',
    'append_key',
    'clean_assertions',
    'clean_parameters',
    'compose',
    'duplicate_key',
    'validate_step',
)
