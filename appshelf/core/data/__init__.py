"""Static data shipped with appshelf (the default catalog.yml)."""
