from ._dispatch import DispatchTable, create_dispatch_table

__all__ = [DispatchTable.__name__, create_dispatch_table.__name__]
