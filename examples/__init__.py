"""
Guided-walk examples for the wayfinder guidance engine.

Examples:
    - example_guided_walk.py: Full session (selection, blueprint, guidance,
      arrival) replayed from a synthetic or recorded walk, with plots of the
      route overview and of the heading/step processing.
"""

__all__ = []
