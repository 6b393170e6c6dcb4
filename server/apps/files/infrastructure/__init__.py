"""Infrastructure layer for files app.

This package contains integrations with external systems:
- Custom storage backend (S3/MinIO)
- Message queue used by the thumbnail worker
- Content helpers (MIME type, payload decoding, storage keys)

Keep infrastructure concerns separate from business logic.
"""
