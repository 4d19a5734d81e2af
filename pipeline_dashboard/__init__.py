"""Sales pipeline dashboard loader.

Reads the pipeline sheet (CSV export, published CSV URL or Sheets API), turns
it into an immutable Report of categorized deals and forecast rollups, and
falls back to a bundled snapshot when the sheet cannot be fetched.
"""

__version__ = "0.1.0"
