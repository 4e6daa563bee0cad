"""Test package for DocuEase.

Structure:
    - unit/: Individual function and class tests
    - integration/: HTTP endpoints through the ASGI app

Test PDFs are generated with PyMuPDF in conftest, so no binary fixtures are
checked in. Leverages pytest with pytest-check for soft assertions.
"""
