"""Allow ``python -m trustee_pin``."""

from trustee_pin.cli import app

app(prog_name="clevis-pin-trustee")
