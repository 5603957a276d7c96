"""twtools: fetch, cache, and archive tweets via the syndication endpoint."""
