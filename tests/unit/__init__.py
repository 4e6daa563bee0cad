"""Unit tests for individual components in isolation.

Coverage:
    - parsing/, rendering/, tools/: PDF loading, rasterization and editing
    - payments/: Checksums, pricing, gateway clients and reconciliation
    - storage/: Firestore store against a mocked client
    - ai/: Document AI service with Agno patched out

Uses mocks for external services (Firestore, Stripe, HTTP gateways, LLM).
Leverages pytest-check for multiple assertions per test.
"""
