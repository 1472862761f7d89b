"""
CSAT exam catalog - metadata API and maintenance tooling for exam PDFs.
"""

__version__ = "1.0.0"
