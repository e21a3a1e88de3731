"""
Persistence adapters.

Each store owns one JSON document (a sequence of records) and rewrites it in
full after every mutation. Services depend on the stores rather than touching
the JSON files.
"""
