"""Settings, errors, logging and the application container."""
