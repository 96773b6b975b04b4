"""Ordering and step composition core for QA test case management.

The `spectra` package keeps test cases in a user-defined order and
builds them from validated steps.

Key features:
- a static catalog of actions, assertions, and key options, with the
  rules tying them together;
- validation and cleanup of action steps against the catalog;
- reusable shared steps referenced from test cases and expanded into a
  nested tree on read;
- fractional execution order keys with periodic rebalancing.

Transport, authentication, and permissions are left to the caller.
"""
