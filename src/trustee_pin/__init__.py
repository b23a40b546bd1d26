"""Clevis PIN that binds data to keys released by Trustee attestation."""

__version__ = "0.1.0"
