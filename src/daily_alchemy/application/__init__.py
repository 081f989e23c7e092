"""
Application layer for Daily Alchemy.

This layer contains application services that orchestrate domain models and infrastructure.
Services coordinate between the domain layer and external dependencies like the HTTP API,
device-local storage and the co-op bus.
"""
