"""Core components: configuration, extraction, deployment, output and transport."""
