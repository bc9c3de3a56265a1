"""Report renderers: terminal, JSON, CSV."""
