"""Engine layer: Astronomy Engine adapter, gravity simulation handle, SPICE frames."""
