"""tagtree — tree layout and incremental grafting for Word/Link annotation graphs."""

__version__ = "0.1.0"
