# ==============================================================================
# Infrastructure Adapters
# ==============================================================================
"""
Concrete implementations of the repository and sink ports.

Provides:
- repositories: PostgreSQL and CSV activity sources
- sinks: HTTP report delivery
"""
