"""
Allow running the package directly: python -m mandelzoom
"""
from .app import run

run()
