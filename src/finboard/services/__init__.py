"""Domain services; each takes ``user_id`` and a ``session_factory`` keyword."""
