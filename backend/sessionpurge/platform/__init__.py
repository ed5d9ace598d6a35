"""Platform integrations: search index, object storage, deletion workers, Temporal."""
