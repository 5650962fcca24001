"""Built-in plugins shipped with kuructl."""
