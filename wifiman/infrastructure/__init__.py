"""wifiman infrastructure - native wireless backends."""
