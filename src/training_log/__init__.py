"""Training Log - analytics core for a personal endurance-training log."""

__version__ = "0.1.0"
