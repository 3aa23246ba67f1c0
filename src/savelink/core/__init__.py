"""Core logic for savelink: store, links, sync, launch and setup."""
