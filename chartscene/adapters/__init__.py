from .normalize import CategoricalPayload, ValueColumn, normalize

__all__ = ["CategoricalPayload", "ValueColumn", "normalize"]
