"""Orien - personal AI companion backend."""
