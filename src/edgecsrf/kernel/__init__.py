"""edgecsrf kernel — exception hierarchy."""
