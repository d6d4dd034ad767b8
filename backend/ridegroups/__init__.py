"""RideGroups: social cycling groups API."""
