"""
Merchant Dashboard Analytics

Transaction analytics backend for the merchant payment dashboard.
"""

__version__ = "1.0.0"
