"""openEMS microstrip quarter-wave stub simulation."""
