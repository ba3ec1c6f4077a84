"""Field group synthesis."""

from .field_groups import FieldGroupSynthesizer, field_group_for

__all__ = ["FieldGroupSynthesizer", "field_group_for"]
