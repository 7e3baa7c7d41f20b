"""Kernel value types – offsets and results."""
from journal_query.kernel.types.offset import NoOffset, Offset, Sequence, to_offset
from journal_query.kernel.types.result import Err, Ok, Result

__all__ = ["Err", "NoOffset", "Ok", "Offset", "Result", "Sequence", "to_offset"]
