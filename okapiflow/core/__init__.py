"""Core primitives: errors, quest progression, session timer, space context."""
