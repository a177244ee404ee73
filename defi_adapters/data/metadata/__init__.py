"""Token and adapter metadata resolution."""
