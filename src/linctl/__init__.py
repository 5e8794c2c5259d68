"""linctl - command-line client for the Linear issue tracker."""

__version__ = "0.1.0"
