"""Core data model, aggregation, pagination, image and timeline logic."""
