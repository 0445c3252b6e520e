"""Room session adapter between transport and game engine."""
