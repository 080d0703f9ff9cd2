"""Utility functions for salonbook."""

from salonbook.utils.date_parser import parse_date, day_of_week
from salonbook.utils.time_parser import parse_time, format_time
from salonbook.utils.amount_parser import check_money, parse_amount

__all__ = ["parse_date", "day_of_week", "parse_time", "format_time", "parse_amount",
           "check_money"]
