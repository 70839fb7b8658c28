"""Calculator pricing extractor.

Reads the pricing workbook maintained by the sales team and writes the
calculator configuration artifact (settings + pricing lookup maps).
"""

__version__ = "0.1.0"
