"""Infrastructure layer: filesystem access and the topology store.

The store (:class:`~nkt.infrastructure.root.Root`) owns every loaded
collection and is the only component that writes collection files.
"""
