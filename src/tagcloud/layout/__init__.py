"""Packing engine: occupancy grid, mask extraction, ring search, scheduling."""
