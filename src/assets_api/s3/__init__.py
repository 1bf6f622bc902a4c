"""Functions for working with S3 objects, one module per CRUD concern."""
