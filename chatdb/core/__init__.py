"""Configuration, logging, security and store lifecycle."""
