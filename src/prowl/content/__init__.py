"""Content layer — file kinds, fingerprints, change ledger, and watcher."""
