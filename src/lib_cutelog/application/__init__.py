"""Application layer: ports the cutelog adapters implement and depend on."""
