"""cardclone — single-edition cards stored in cloned code images."""

__version__ = "0.1.0"
