"""Social OS: a social timeline with a personalized conversational agent."""

__version__ = "0.1.0"
