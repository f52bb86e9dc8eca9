"""covert — convert code coverage data to Cobertura XML."""

__version__ = "0.4.0"
