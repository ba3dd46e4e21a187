"""Content versioning and template-propagation engine."""

__version__ = "0.1.0"
