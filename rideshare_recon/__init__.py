# rideshare_recon/__init__.py
"""
Statement import and shift reconciliation for rideshare drivers.
"""

__version__ = "0.1.0"
