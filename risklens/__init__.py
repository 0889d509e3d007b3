"""
RiskLens - risk register analytics

Near-duplicate detection, risk correlation networks, cascade discovery,
force-directed layout and tone analysis over an in-memory risk register.
"""

__version__ = "1.0.0"
