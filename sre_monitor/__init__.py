"""SRE Monitor: request admission, outcome metrics and health reporting."""

__version__ = "2.0.0"
