"""EU AI Act compliance questionnaire."""

__version__ = "0.1.0"
