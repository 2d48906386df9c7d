"""Cache hit-ratio simulation over synthetic and recorded access traces, with benchmark chart tools."""

__version__ = "0.1.0"