"""Grounded folklore guide over the NDL Lab digitized-book search."""
