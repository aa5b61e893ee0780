"""BalloonWatch: balloon trajectory ingestion and drift risk service."""
