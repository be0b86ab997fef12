"""
API endpoints package
"""

from . import health
from . import ingestion
from . import properties
