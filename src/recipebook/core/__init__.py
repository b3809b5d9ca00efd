"""Input models, error types and photo acquisition."""
