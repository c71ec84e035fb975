"""Library lending domain: book and patron aggregates, command and query handlers, jobs and a catalogue event consumer."""

__version__ = "0.1.0"