"""Domain Event definitions.

Represents significant occurrences during request execution that callers
can observe through an event listener.
"""
