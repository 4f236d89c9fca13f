"""MediaVault client: browse, submit and administer media resources."""

__version__ = "1.0.0"
