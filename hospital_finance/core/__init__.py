"""Domain model, configuration, logging and security for the dataset engine."""
