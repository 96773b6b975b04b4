"""Relational store of test cases and shared steps.

It provides:
- a SQLite database with thread-local connections and explicit
  transactions;
- shared step and test case operations, combined into `Repository`;
- execution order rebalancing, on demand or on a schedule.

The primary public entry point is `Repository`.
"""

from .database import Database
from .maintenance import RebalanceScheduler, rebalance
from .repository import Repository

__all__ = (
    'Database',
    'RebalanceScheduler',
    'Repository',
    'rebalance',
)
