"""
Infrastructure Package
======================

Provides abstraction layers for external dependencies following the Dependency Inversion Principle.

Modules:
    - payments: Payment provider abstraction (Stripe charges, Connect transfers)
    - weather: Weather provider abstraction (AccuWeather)
    - storage: Upload store abstraction (S3, local filesystem)

This package enables:
    - Easy testing with mock implementations
    - Switching between providers without code changes
    - Loose coupling between business logic and infrastructure
"""
