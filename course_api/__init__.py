"""Course enrollment and contact form API."""

__version__ = "1.0.0"
