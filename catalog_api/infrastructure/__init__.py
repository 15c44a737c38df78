"""Infrastructure layer: configuration, database, logging, auth service client."""
