"""Core data models for proofsheet."""
