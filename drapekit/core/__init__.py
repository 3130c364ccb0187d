"""Core — Context, engine, errors, and logging."""
