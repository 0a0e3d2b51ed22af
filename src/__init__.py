"""Pusula - gamified learning progression engine."""
