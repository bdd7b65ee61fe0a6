"""
CarePass - time-bound, scope-limited access tokens over patient records
"""

__version__ = "0.1.0"
