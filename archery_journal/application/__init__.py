"""Application layer: ports and editor state used by the presentation layer."""
