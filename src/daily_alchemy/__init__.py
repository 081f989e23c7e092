"""Daily Alchemy game engine: daily puzzles, creative slots and co-op play."""

__version__ = "1.0.0"
