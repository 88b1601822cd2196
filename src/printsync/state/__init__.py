"""State/store layer.

This package is the single source of truth for how status fragments from
polling are merged into the printer snapshot. Only the store mutates it.
"""
