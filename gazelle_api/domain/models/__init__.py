"""Domain models: the API envelope, torrents, groups, users and upload forms."""
