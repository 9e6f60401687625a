"""Tests for the TP-Link smart plug library."""
