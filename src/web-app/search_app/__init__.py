"""Search web app — search interface state machine, backends and auth session."""
