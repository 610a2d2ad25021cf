"""eas-build: build preset resolution and signing credentials reconciliation."""

__version__ = "0.1.0"
