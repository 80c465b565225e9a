"""hookgate command-line interface."""
