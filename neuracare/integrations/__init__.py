"""Provider clients for AI insight generation."""
