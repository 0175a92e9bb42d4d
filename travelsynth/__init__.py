"""TravelSynth: merge travel articles into one grounded guide."""
