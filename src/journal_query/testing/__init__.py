"""Testing helpers – fakes for deterministic tests."""
