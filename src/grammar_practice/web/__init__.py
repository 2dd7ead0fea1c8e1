"""Web API for grammar practice."""
