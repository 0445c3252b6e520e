"""Board model, validation and the game state machine."""
