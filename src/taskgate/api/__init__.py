"""HTTP surface for taskgate.

A FastAPI application exposing the task routes, plus an explicit
server handle that owns the listening socket.
"""
