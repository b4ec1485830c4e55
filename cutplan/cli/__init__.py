"""Command line interface for Workshop Cut Planner."""
