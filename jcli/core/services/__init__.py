"""Services — probes, catalog, executors, status engine, remote lifecycle."""
