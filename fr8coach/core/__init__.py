"""Core services: configuration, logging, errors and coaching pipeline."""
