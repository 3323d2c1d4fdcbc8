"""Headless cellular-automata bullet playground, rule editor and mob-gathering sandbox."""

__version__ = "0.1.0"