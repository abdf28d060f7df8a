"""Steps concretos do cdrom_builder."""
