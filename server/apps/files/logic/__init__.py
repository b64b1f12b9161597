"""Business logic layer for files app.

This package contains all business logic of the drive:
- Folder tree management (create, move, delete, lock, listings)
- File placement (upload records, move, delete, categories)
- Duplication of files and whole folder subtrees
- Zip export of folder subtrees

Every public function takes the ID of the already authenticated
user first and raises ``server.apps.files.exceptions`` errors.
Models (data layer) and infrastructure (external systems) stay
outside of this package.
"""
