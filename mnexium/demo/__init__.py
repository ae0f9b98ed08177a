"""Demo chat server: a small browser UI over the Mnexium API.

Usage:
    python -m mnexium.demo
"""
