"""core/ -- Configuration, the shared database pool, and the error taxonomy."""
