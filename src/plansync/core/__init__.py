"""Core sync domains: contracts, storage, records, engine and remote adapters."""
