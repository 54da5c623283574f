"""Core domain models, configuration and snapshot I/O."""
