"""Test suite for the spectra package.

This package contains unit and integration tests validating the
catalog, step validation, execution order allocation, step tree
composition, and the SQLite-backed stores.
"""
