"""Step definitions, tag-selected hooks and a Cucumber wire protocol codec and server."""

__version__ = "0.1.0"