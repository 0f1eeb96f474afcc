"""Music theory and fretboard geometry for equal divisions of the octave."""
