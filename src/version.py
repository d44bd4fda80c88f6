"""Service version reported by the /v1/info endpoint."""

# has to be kept in sync with version in pyproject.toml
__version__ = "0.1.0"
