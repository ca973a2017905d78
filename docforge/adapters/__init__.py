"""Adapters connecting docforge to storage and client transports."""
