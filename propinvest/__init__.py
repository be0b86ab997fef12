"""
Property investment normalizer: canonical property records and investment
metrics from loosely-structured real-estate tables.
"""

__version__ = "1.0.0"
