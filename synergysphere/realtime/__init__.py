"""Realtime infrastructure (Socket.IO room registry and event relay).

Route handlers publish committed project/task changes through the relay; the
relay fans them out to ``user-<id>`` and ``project-<id>`` rooms.
"""
