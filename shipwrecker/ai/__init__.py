"""Computer-opponent targeting strategies."""
