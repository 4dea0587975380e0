"""Virgin Initiatives core.

Session handling for the signed-in user, the initiative catalog parser and the
aggregation pipeline that turns participation records into impact summaries.
"""

__version__ = "0.1.0"
