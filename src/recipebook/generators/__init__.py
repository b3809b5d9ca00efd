"""Template registry and document generators."""
