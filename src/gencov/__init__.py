"""gencov: generic coverage and unit-test report importer."""

__version__ = "0.1.0"
