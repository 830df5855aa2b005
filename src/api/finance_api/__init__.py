"""Finance Search API — mock search and Finance GPT analysis over FastAPI."""
