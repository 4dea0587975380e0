"""Initiative domain module.

Catalog records, the delimited-text parser and the aggregation pipeline.
"""
