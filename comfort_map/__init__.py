"""Animated bike comfort map: synthetic comfort field and gradient-following agents."""

__version__ = "0.1.0"
