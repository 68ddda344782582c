"""Version decoding and resolution for script modules."""
