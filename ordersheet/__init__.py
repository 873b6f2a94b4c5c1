"""Order desk: catalog maintenance and order sheet export for wholesale orders."""

__version__ = "0.1.0"
