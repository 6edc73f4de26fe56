"""Status engine — concurrent probing behind ``j status``."""
