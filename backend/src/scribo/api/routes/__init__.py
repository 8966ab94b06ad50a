"""Generation, billing, usage and health routers."""
