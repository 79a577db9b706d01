# WORKFLOW: ETL package for loading a Q&A site data dump into a database.
# Used by: scripts/import_dump.py, tests
# Modules include:
# 1. entities.py - Typed entities for the dump tables and lookup tables
# 2. schemas.py - Per-table attribute schemas and value parsers
# 3. xml_reader.py - Streaming XML decoder (rows -> typed field maps)
# 4. archive.py - Locate a table inside .zip/.7z archives or extracted directories
# 5. placeholders.py - Stand-in users/posts for ids missing from the dump
# 6. seed_data.py - Fixed lookup enumerations
# 7. destination.py - Contract every destination implements
# 8. pipeline.py - Stage-by-stage import with referential repair
#
# ETL flow: Archive -> XML decode -> Referential repair -> Destination (buffer, batch, flush)
# Every foreign key handed to the destination resolves to a row stored no later than its flush.

"""
ETL package for loading a Q&A site data dump into a database.
"""
