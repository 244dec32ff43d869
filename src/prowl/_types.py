"""Shared type definitions for prowl."""

from typing import Literal, TypeAlias

# Classification of a watched file, derived from its extension
FileKind: TypeAlias = Literal["markup", "script", "style", "component", "unknown"]

# Hex digest of normalized file content
Fingerprint: TypeAlias = str

# Outcome of recording a fingerprint in the change ledger
Classification: TypeAlias = Literal["first_seen", "changed", "unchanged"]

# Text frame pushed to live clients
ReloadSignal: TypeAlias = Literal["reload", "reload-main"]

# Bootstrap sequencer phases, strictly ordered
Phase: TypeAlias = Literal["idle", "hashes_populated", "hooks_run", "entry_resolved", "serving"]
