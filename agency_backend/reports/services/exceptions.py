# reports/services/exceptions.py

"""
REPORT SERVICE ERRORS
"""


class ReportError(ValueError):
    """Raised for bad report parameters (unknown range, malformed dates)."""
