"""Domain entities - pure dataclasses with no external dependencies.

These entities represent the core business objects in the domain model.
"""

from valuation_api.domain.entities.fundamentals import FinancialMetrics, RawFinancials

__all__ = [
    "FinancialMetrics",
    "RawFinancials",
]
