"""Typed configuration binding for edgecsrf."""
