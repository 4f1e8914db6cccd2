"""
Core of the schedule dependency graph: types, graph store, validation,
repository and storage.
"""
