from .registry import Coordinates, ReferenceDataRegistry

__all__ = ["Coordinates", "ReferenceDataRegistry"]
