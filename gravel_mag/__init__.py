"""Gravel Mag — magazine gravel : articles, annuaire des courses, newsletter."""
__version__ = "0.1.0"
