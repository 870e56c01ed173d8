"""Infrastructure: configuration, database, logging and the asset store."""
