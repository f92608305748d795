"""
app/validators package marker.
"""

from app.validators.coercion import coerce_number, parse_date
from app.validators.sales_row_validator import SalesRowValidator

__all__ = [
    "coerce_number",
    "parse_date",
    "SalesRowValidator",
]
