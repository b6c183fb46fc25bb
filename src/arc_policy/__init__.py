"""ARC Policy: compliance and security checks for GitHub Actions runner scale sets."""

__version__ = "0.1.0"
