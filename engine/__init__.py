"""Ambient services shared by the planner: configuration, logging and events."""
