"""Access to the realised output of a simulation run."""
