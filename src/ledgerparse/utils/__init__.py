"""Lexical parsing utilities for ledgerparse."""

from ledgerparse.utils.date_parser import parse_date, parse_datetime
from ledgerparse.utils.amount_parser import parse_amount, parse_quantity

__all__ = ["parse_date", "parse_datetime", "parse_amount", "parse_quantity"]
