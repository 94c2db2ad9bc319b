"""Infrastructure: store client, logging and metrics."""
