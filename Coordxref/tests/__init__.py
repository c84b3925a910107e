"""Tests for the Coordxref suite."""
