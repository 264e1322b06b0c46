"""Controller, transport and history cache."""
