"""Core domain: registry, snapshot, scenarios, samplers and traffic simulation."""
