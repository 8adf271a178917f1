"""Rule catalogue and the engine that runs it."""
