"""HTTP API over brief extraction and stage gating."""
