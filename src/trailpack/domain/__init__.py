"""Domain layer: record model, selection, reconciliation, resolution, manifests."""
