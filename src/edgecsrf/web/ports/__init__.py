"""Web ports — framework-agnostic interfaces."""
