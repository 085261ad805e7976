# ABOUTME: audioshelf - an audiobook library manager and playback state engine.
# ABOUTME: See audioshelf.core.store.LibraryStore for the entry point.
