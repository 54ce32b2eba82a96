"""
Model registration for migrations and the schema initializer: import every table model here.
"""
from apps.samples.models import Sample

__all__ = ["Sample"]
