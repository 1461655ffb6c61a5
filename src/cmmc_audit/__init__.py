"""CMMC 2.0 / NIST SP 800-171 configuration auditor for Windows hosts."""

__version__ = "1.0.0"
