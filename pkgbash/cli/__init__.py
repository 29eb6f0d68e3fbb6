"""Command implementations for the pkgbash CLI."""
