"""Record store implementations behind the IRecordStore interface."""
