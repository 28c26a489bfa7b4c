"""clipmod - clipboard history recorder with scriptable text modifiers."""

__version__ = "0.1.0"
