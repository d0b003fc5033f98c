"""
Parking data validator.

Validates and repairs the parking-capacity dataset, recomputes utilization
statistics, writes reports and keeps rotating backups of the source file.
"""

__version__ = "2.0.0"
