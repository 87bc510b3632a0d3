"""Storage collaborator: the protocol the save path calls and a SQLite implementation."""
