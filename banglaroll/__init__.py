"""
BanglaRoll: recover voter records from Bengali electoral roll PDFs whose
text layer was produced through a broken font mapping.
"""

__version__ = "0.1.0"
