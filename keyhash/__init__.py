"""Android key hash resolver — signing-key fingerprints for platform whitelisting."""

__version__ = "0.1.0"
