"""Infrastructure — adapters for the database, the hosted model, the identity provider and logging."""
