"""Daybook - a markdown bullet journal with projected and recurring entries."""

__version__ = "0.1.0"
