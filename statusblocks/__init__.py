"""Status bar block logic, click handling and Pango markup escaping."""

__version__ = "0.1.0"