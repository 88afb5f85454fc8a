"""Service clients used by the operator."""
