"""mdtabs - a tabbed markdown editor for the terminal."""

__version__ = "0.1.0"
