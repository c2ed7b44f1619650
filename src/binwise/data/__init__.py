"""Dataset loading for the student records files."""

from binwise.data.loader import derive_outcome, load_dataset

__all__ = ["derive_outcome", "load_dataset"]
