"""
Server actions: the mutation boundary between endpoints and the query layer.

Every action takes the caller's identity explicitly, validates its input,
applies plan limits, performs the ownership-scoped change and invalidates
the cached views it affected.
"""
