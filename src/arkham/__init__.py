"""ARKHAM: branching scenario export tooling."""

__version__ = "0.1.0"
