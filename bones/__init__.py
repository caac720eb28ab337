"""Bones — bootstrap a project from a remote template repository."""

__version__ = "0.1.0"
