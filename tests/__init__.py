"""Tests for devinit."""
