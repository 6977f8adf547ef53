"""Built-in plugins registered by every host."""
