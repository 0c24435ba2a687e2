"""Command line interface; run with `python -m sheetbind.cli`."""
