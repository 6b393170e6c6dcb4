"""Business logic layer for files app.

This package contains all business logic for file operations:
- Upload of files, images and folders
- Retrieval, listing and visibility changes
- Content reads, including image thumbnails
- Thumbnail generation run by the background worker

All business logic should be implemented here, separate from
models (data layer) and infrastructure (external systems).
"""
