"""Flask blueprints: the JSON API under /api/v1 plus server-rendered pages."""
