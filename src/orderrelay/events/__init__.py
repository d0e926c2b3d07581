"""Event vocabulary — type constants and the ingestion catalog."""
