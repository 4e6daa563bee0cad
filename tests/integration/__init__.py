"""Integration tests for components working together as a system.

Coverage:
    - PDF tool endpoints with real uploads and real PDF processing
    - Payment creation, callback reconciliation and status over HTTP
    - Document AI endpoints and their error mapping

Firestore is replaced by an in-memory store through dependency overrides;
outgoing gateway and LLM calls are patched. No network access is needed.
"""
