"""Lobby domain services: code registry, player index and state machine.

Everything here talks to the document store only through its transaction
primitive or plain get/set, and keeps no state between calls, so HTTP
routes can call into it from any worker.
"""
