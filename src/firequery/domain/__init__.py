"""Domain layer - value types and abstractions with zero external dependencies.

This layer contains:
- types: Dynamic values, query parameters, wire shapes and completion types
- protocols: Interfaces supplied by host applications

The domain layer has NO dependencies on core, completion, or CLI layers.
"""
